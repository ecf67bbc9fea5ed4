"""定义报表聚合器输出的统一数据模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass
class RevenueTotals:
    """
    一个时间窗口内的营收汇总。

    新版 Analytics 接口会填充全部字段（缺失时为 0）；旧版 sales 报表只能提供
    total_sales，其余字段保持 None，表示“无法获取”而不是“为零”。

    属性:
        total_sales (Optional[float]): 总销售额（gross sales）。
        net_revenue (Optional[float]): 净收入。
        orders_count (Optional[int]): 订单数。
        items_sold (Optional[int]): 售出件数。
        refunds (Optional[float]): 退款金额。
        taxes (Optional[float]): 税费。
        shipping (Optional[float]): 运费。
        discounts (Optional[float]): 折扣金额。
    """

    total_sales: Optional[float] = None
    net_revenue: Optional[float] = None
    orders_count: Optional[int] = None
    items_sold: Optional[int] = None
    refunds: Optional[float] = None
    taxes: Optional[float] = None
    shipping: Optional[float] = None
    discounts: Optional[float] = None


@dataclass
class RevenueIntervalPoint(RevenueTotals):
    """单个时间桶（日/周/月）的营收数据，date 为上游返回的桶日期。"""

    date: Optional[str] = None


@dataclass
class RevenueStats:
    """
    营收统计结果。

    属性:
        totals (RevenueTotals): 窗口汇总。
        intervals (List[RevenueIntervalPoint]): 按上游顺序排列的时间桶，不重新排序。
    """

    totals: RevenueTotals = field(default_factory=RevenueTotals)
    intervals: List[RevenueIntervalPoint] = field(default_factory=list)


@dataclass
class OrdersTotals:
    """订单汇总，降级为空结果时全部字段为 None。"""

    orders_count: Optional[int] = None
    avg_order_value: Optional[float] = None
    net_revenue: Optional[float] = None
    refunds: Optional[float] = None


@dataclass
class OrdersIntervalPoint(OrdersTotals):
    date: Optional[str] = None


@dataclass
class OrdersStats:
    totals: OrdersTotals = field(default_factory=OrdersTotals)
    intervals: List[OrdersIntervalPoint] = field(default_factory=list)


@dataclass
class TopProductItem:
    """
    热销榜中的单个商品。

    属性:
        product_id (int): 商品 ID，无法识别时为 0。
        name (Optional[str]): 商品名称。
        quantity (int): 售出数量。
        total (float): 净收入。
    """

    product_id: int
    name: Optional[str]
    quantity: int
    total: float


@dataclass
class ProductStatsPoint:
    """
    展平后的单条商品时间序列记录，每个 (date, product) 组合一条。

    属性:
        date (Optional[str]): 所属时间桶日期。
        product_id (int): 商品 ID。
        quantity (int): 售出数量。
        net_revenue (float): 净收入。
    """

    date: Optional[str]
    product_id: int
    quantity: int
    net_revenue: float


class CredentialProvider(Protocol):
    """
    定义报表聚合器期望的凭证字段集合。

    属性:
        site_url (str): 站点根地址。
        consumer_key (str): WooCommerce consumer key。
        consumer_secret (str): WooCommerce consumer secret。
    """

    site_url: str
    consumer_key: str
    consumer_secret: str
