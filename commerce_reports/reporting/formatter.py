"""提供报表结果的结构化与文本格式化工具。"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from ..data_sources.base import (
    OrdersStats,
    ProductStatsPoint,
    RevenueStats,
    TopProductItem,
)
from ..metrics.calculations import RevenueTrend
from ..utils.dates import ResolvedRange


def _compact(record: object) -> Dict[str, Any]:
    """将 dataclass 转为字典并去掉值为 None 的字段。"""
    return {key: value for key, value in asdict(record).items() if value is not None}


def _with_date_first(record: object) -> Dict[str, Any]:
    payload = _compact(record)
    if "date" not in payload:
        return payload
    return {"date": payload.pop("date"), **payload}


def range_to_dict(window: ResolvedRange) -> Dict[str, str]:
    return {"after": window.after, "before": window.before}


def revenue_stats_to_dict(stats: RevenueStats) -> Dict[str, object]:
    """
    功能说明:
        将 RevenueStats 转换为可 JSON 序列化的字典；旧版报表无法提供的字段不会出现。
    参数:
        stats (RevenueStats): 营收统计结果。
    返回:
        Dict[str, object]: 包含 totals 与 intervals 的字典。
    """
    return {
        "totals": _compact(stats.totals),
        "intervals": [_with_date_first(point) for point in stats.intervals],
    }


def orders_stats_to_dict(stats: OrdersStats) -> Dict[str, object]:
    """
    功能说明:
        将 OrdersStats 转换为字典，降级结果序列化为 `{"totals": {}, "intervals": []}`。
    参数:
        stats (OrdersStats): 订单统计结果。
    返回:
        Dict[str, object]: 包含 totals 与 intervals 的字典。
    """
    return {
        "totals": _compact(stats.totals),
        "intervals": [_with_date_first(point) for point in stats.intervals],
    }


def top_products_to_list(items: List[TopProductItem]) -> List[Dict[str, object]]:
    return [asdict(item) for item in items]


def product_stats_to_list(points: List[ProductStatsPoint]) -> List[Dict[str, object]]:
    return [asdict(point) for point in points]


def revenue_trend_to_dict(trend: RevenueTrend) -> Dict[str, object]:
    return {
        "metric": trend.metric,
        "window": trend.window,
        "series": [asdict(point) for point in trend.points],
        "summary": {"sum": trend.total, "avg": trend.average},
        "growth": trend.growth,
    }


def _money(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return "$" + format(value, ",.2f")


def _count(value: Optional[int]) -> str:
    return "n/a" if value is None else str(value)


def format_revenue_report(stats: RevenueStats, window: ResolvedRange) -> str:
    """
    功能说明:
        生成适合在控制台展示的营收报表文本。
    参数:
        stats (RevenueStats): 营收统计结果。
        window (ResolvedRange): 查询使用的时间范围。
    返回:
        str: 多行字符串，包含汇总与各时间桶的销售额。
    """
    totals = stats.totals
    lines: List[str] = [f"Window: {window.after} to {window.before}"]
    lines.append(
        f"Totals: Sales {_money(totals.total_sales)}, Net {_money(totals.net_revenue)}, "
        f"Orders {_count(totals.orders_count)}, Items {_count(totals.items_sold)}, "
        f"Refunds {_money(totals.refunds)}, Taxes {_money(totals.taxes)}, "
        f"Shipping {_money(totals.shipping)}, Discounts {_money(totals.discounts)}"
    )
    if not stats.intervals:
        lines.append("No interval records available.")
        return "\n".join(lines)

    lines.append("Intervals:")
    for point in stats.intervals:
        lines.append(f"  {point.date}: Sales {_money(point.total_sales)}, Net {_money(point.net_revenue)}")
    return "\n".join(lines)


def format_top_products_report(items: List[TopProductItem], window: ResolvedRange) -> str:
    lines: List[str] = [f"Window: {window.after} to {window.before}"]
    if not items:
        lines.append("No product records available.")
        return "\n".join(lines)

    lines.append("Top products (by net revenue):")
    for idx, item in enumerate(items, start=1):
        name = item.name or f"Product {item.product_id}"
        lines.append(f"{idx}. {name} (#{item.product_id}) - Revenue {_money(item.total)}, Units {item.quantity}")
    return "\n".join(lines)


def format_orders_report(stats: OrdersStats, window: ResolvedRange) -> str:
    totals = stats.totals
    lines: List[str] = [f"Window: {window.after} to {window.before}"]
    if totals.orders_count is None and not stats.intervals:
        lines.append("Orders statistics unavailable.")
        return "\n".join(lines)

    lines.append(
        f"Totals: Orders {_count(totals.orders_count)}, AOV {_money(totals.avg_order_value)}, "
        f"Net {_money(totals.net_revenue)}, Refunds {_money(totals.refunds)}"
    )
    for point in stats.intervals:
        lines.append(f"  {point.date}: Orders {_count(point.orders_count)}, Net {_money(point.net_revenue)}")
    return "\n".join(lines)


def format_product_stats_report(points: List[ProductStatsPoint], window: ResolvedRange) -> str:
    lines: List[str] = [f"Window: {window.after} to {window.before}"]
    if not points:
        lines.append("No product statistics available.")
        return "\n".join(lines)

    for point in points:
        lines.append(
            f"  {point.date} #{point.product_id}: Units {point.quantity}, Net {_money(point.net_revenue)}"
        )
    return "\n".join(lines)


def format_trend_report(trend: RevenueTrend, window: ResolvedRange) -> str:
    lines: List[str] = [f"Window: {window.after} to {window.before}"]
    growth = "n/a" if trend.growth is None else f"{trend.growth:.2%}"
    lines.append(
        f"Metric {trend.metric}: Sum {trend.total:,.2f}, Avg {trend.average:,.2f}, "
        f"Latest growth {growth}"
    )
    for point in trend.points:
        lines.append(f"  {point.date}: {point.value:,.2f} (MA{trend.window} {point.moving_average:,.2f})")
    return "\n".join(lines)
