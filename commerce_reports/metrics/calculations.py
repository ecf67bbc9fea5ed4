"""提供增长率、移动平均等趋势计算，以及基于营收时间桶的趋势分析。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..data_sources.base import RevenueStats

REVENUE_METRICS = (
    "total_sales",
    "net_revenue",
    "orders_count",
    "items_sold",
    "refunds",
    "taxes",
    "shipping",
    "discounts",
)


@dataclass
class TrendPoint:
    """
    趋势序列中的单个点。

    属性:
        date (Optional[str]): 时间桶日期。
        value (float): 指标原值。
        moving_average (float): 截至该点的移动平均。
    """

    date: Optional[str]
    value: float
    moving_average: float


@dataclass
class RevenueTrend:
    """
    营收趋势分析结果。

    属性:
        metric (str): 被分析的指标名称。
        window (int): 移动平均窗口。
        points (List[TrendPoint]): 按上游顺序排列的趋势点。
        total (float): 指标合计。
        average (float): 指标均值。
        growth (Optional[float]): 最近一个时间桶相对前一个的增长率。
    """

    metric: str
    window: int
    points: List[TrendPoint]
    total: float
    average: float
    growth: Optional[float]


def compute_growth(current: float, previous: Optional[float]) -> Optional[float]:
    if previous is None or previous == 0:
        return None
    return (current - previous) / previous


def moving_average(series: Sequence[float], window: int) -> List[float]:
    """
    功能说明:
        计算尾随窗口的移动平均，序列开头不足一个窗口时使用已有的点。
    参数:
        series (Sequence[float]): 原始序列。
        window (int): 窗口大小，小于等于 1 时原样返回副本。
    返回:
        List[float]: 与输入等长的平均值序列。
    """
    if window <= 1:
        return list(series)
    averages: List[float] = []
    for idx in range(len(series)):
        subset = series[max(0, idx - window + 1): idx + 1]
        averages.append(sum(subset) / len(subset))
    return averages


def summarize(values: Sequence[float]) -> Dict[str, float]:
    if not values:
        return {"sum": 0.0, "avg": 0.0}
    total = float(sum(values))
    return {"sum": total, "avg": total / len(values)}


def build_revenue_trend(
    stats: RevenueStats,
    *,
    metric: str = "net_revenue",
    window: int = 3,
) -> RevenueTrend:
    """
    功能说明:
        从营收时间桶中抽取单个指标，计算移动平均、合计均值与环比增长。
        旧版报表缺失的指标按 0 计入。
    参数:
        stats (RevenueStats): 营收统计结果。
        metric (str): 指标名称，取值见 REVENUE_METRICS。
        window (int): 移动平均窗口。
    返回:
        RevenueTrend: 趋势分析结果。
    """
    if metric not in REVENUE_METRICS:
        raise ValueError(f"Unsupported revenue metric: {metric}")
    values = [float(getattr(point, metric) or 0) for point in stats.intervals]
    averages = moving_average(values, window)
    summary = summarize(values)
    growth = compute_growth(values[-1], values[-2]) if len(values) >= 2 else None
    return RevenueTrend(
        metric=metric,
        window=window,
        points=[
            TrendPoint(date=point.date, value=value, moving_average=average)
            for point, value, average in zip(stats.intervals, values, averages)
        ],
        total=summary["sum"],
        average=summary["avg"],
        growth=growth,
    )
