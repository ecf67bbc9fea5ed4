"""上游报表接口原始响应的结构描述，按报表类型与接口代际区分，所有字段均可缺省。"""

from __future__ import annotations

from typing import List, Union

from typing_extensions import TypedDict

Number = Union[int, float, str, None]


class ModernRevenueSubtotals(TypedDict, total=False):
    gross_sales: Number
    net_revenue: Number
    orders_count: Number
    items_sold: Number
    refunds: Number
    taxes: Number
    shipping: Number
    discounts: Number


class ModernRevenueInterval(TypedDict, total=False):
    date: str
    subtotals: ModernRevenueSubtotals


class ModernRevenueResponse(TypedDict, total=False):
    """wc-analytics/reports/revenue/stats"""

    totals: ModernRevenueSubtotals
    intervals: List[ModernRevenueInterval]


class LegacySalesPoint(TypedDict, total=False):
    date: str
    total_sales: Number


class LegacySalesResponse(TypedDict, total=False):
    """wc/v3/reports/sales 的单条报表对象。"""

    total_sales: Number
    sales: List[LegacySalesPoint]


class ModernProductExtendedInfo(TypedDict, total=False):
    product_id: Number
    name: str


class ModernProductRowSubtotals(TypedDict, total=False):
    items_sold: Number
    net_revenue: Number


class ModernProductRow(TypedDict, total=False):
    product_id: Number
    id: Number
    name: str
    quantity: Number
    total: Number
    extended_info: ModernProductExtendedInfo
    subtotals: ModernProductRowSubtotals


class ModernTopProductsResponse(TypedDict, total=False):
    """wc-analytics/reports/products/stats，行集合可能位于以下任一键下。"""

    data: List[ModernProductRow]
    rows: List[ModernProductRow]
    items: List[ModernProductRow]
    intervals: List[ModernProductRow]


class LegacyTopSeller(TypedDict, total=False):
    """wc/v3/reports/top_sellers 的单行。"""

    product_id: Number
    product: Number
    title: str
    name: str
    quantity: Number
    total: Number


class ModernOrdersSubtotals(TypedDict, total=False):
    orders_count: Number
    avg_order_value: Number
    net_revenue: Number
    refunds: Number


class ModernOrdersInterval(TypedDict, total=False):
    date: str
    subtotals: ModernOrdersSubtotals


class ModernOrdersResponse(TypedDict, total=False):
    totals: ModernOrdersSubtotals
    intervals: List[ModernOrdersInterval]


class ModernProductEntry(TypedDict, total=False):
    product_id: Number
    id: Number
    items_sold: Number
    quantity: Number
    net_revenue: Number
    total: Number


class ModernProductBucketSubtotals(TypedDict, total=False):
    products: List[ModernProductEntry]


class ModernProductBucket(TypedDict, total=False):
    date: str
    subtotals: ModernProductBucketSubtotals
    products: List[ModernProductEntry]


class ModernProductStatsResponse(TypedDict, total=False):
    intervals: List[ModernProductBucket]

