"""把新版 Analytics 与旧版 v3 报表接口的原始 JSON 映射为统一数据模型。

每种 (报表类型, 接口代际) 组合对应一个纯函数，字段缺失、为 null 或无法转换为
数字时一律按 0 处理；只填补缺失，不校验正负。
"""

from __future__ import annotations

import math
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from ..data_sources.base import (
    OrdersIntervalPoint,
    OrdersStats,
    OrdersTotals,
    ProductStatsPoint,
    RevenueIntervalPoint,
    RevenueStats,
    RevenueTotals,
    TopProductItem,
)
from ..data_sources.payloads import (
    LegacySalesResponse,
    LegacyTopSeller,
    ModernOrdersResponse,
    ModernProductRow,
    ModernProductStatsResponse,
    ModernRevenueResponse,
    ModernTopProductsResponse,
)


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _first(*candidates: Any) -> Any:
    """返回第一个“有值”的候选项，None、空字符串与 0 都视为缺失。"""
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def _unwrap_single(payload: Any) -> Mapping[str, Any]:
    # v3 sales 报表在部分站点上以单元素数组返回。
    if isinstance(payload, list):
        return _mapping(payload[0]) if payload else {}
    return _mapping(payload)


# Top 商品行集合的候选位置，按顺序取第一个非空集合。
ROW_COLLECTION_ACCESSORS: Sequence[Callable[[Mapping[str, Any]], Any]] = (
    lambda data: data.get("data"),
    lambda data: data.get("rows"),
    lambda data: data.get("items"),
    lambda data: data.get("intervals"),
)


def _revenue_fields(source: Mapping[str, Any]) -> dict:
    return {
        "total_sales": _to_float(source.get("gross_sales")),
        "net_revenue": _to_float(source.get("net_revenue")),
        "orders_count": _to_int(source.get("orders_count")),
        "items_sold": _to_int(source.get("items_sold")),
        "refunds": _to_float(source.get("refunds")),
        "taxes": _to_float(source.get("taxes")),
        "shipping": _to_float(source.get("shipping")),
        "discounts": _to_float(source.get("discounts")),
    }


def normalize_modern_revenue(payload: ModernRevenueResponse) -> RevenueStats:
    """
    功能说明:
        映射 revenue/stats 响应，`gross_sales` 对应统一模型的 `total_sales`。
    参数:
        payload (ModernRevenueResponse): 原始 JSON。
    返回:
        RevenueStats: 全部字段均已填充的营收统计。
    """
    data = _mapping(payload)
    intervals = [
        RevenueIntervalPoint(
            date=_mapping(point).get("date"),
            **_revenue_fields(_mapping(_mapping(point).get("subtotals"))),
        )
        for point in _sequence(data.get("intervals"))
    ]
    return RevenueStats(
        totals=RevenueTotals(**_revenue_fields(_mapping(data.get("totals")))),
        intervals=intervals,
    )


def normalize_legacy_revenue(payload: Union[LegacySalesResponse, List[LegacySalesResponse]]) -> RevenueStats:
    """
    功能说明:
        映射 v3 sales 报表。旧接口只提供 total_sales，其余汇总字段保持 None。
    参数:
        payload: LegacySalesResponse 或其单元素数组。
    返回:
        RevenueStats: 仅含销售额的营收统计。
    """
    data = _unwrap_single(payload)
    intervals = [
        RevenueIntervalPoint(
            date=_mapping(point).get("date"),
            total_sales=_to_float(_mapping(point).get("total_sales")),
        )
        for point in _sequence(data.get("sales"))
    ]
    return RevenueStats(
        totals=RevenueTotals(total_sales=_to_float(data.get("total_sales"))),
        intervals=intervals,
    )


def _top_product_rows(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    data = _mapping(payload)
    for accessor in ROW_COLLECTION_ACCESSORS:
        rows = _sequence(accessor(data))
        if rows:
            return rows
    return []


def normalize_modern_top_products(
    payload: Union[ModernTopProductsResponse, List[ModernProductRow]],
) -> List[TopProductItem]:
    """
    功能说明:
        映射 products/stats 响应中的商品行，保持上游排名顺序。
    参数:
        payload: 行集合位于 data/rows/items/intervals 之一，或直接为数组。
    返回:
        List[TopProductItem]: 热销商品列表。
    """
    items: List[TopProductItem] = []
    for raw in _top_product_rows(payload):
        row = _mapping(raw)
        extended = _mapping(row.get("extended_info"))
        subtotals = _mapping(row.get("subtotals"))
        items.append(
            TopProductItem(
                product_id=_to_int(_first(row.get("product_id"), extended.get("product_id"), row.get("id"))),
                name=_first(extended.get("name"), row.get("name")),
                quantity=_to_int(_first(subtotals.get("items_sold"), row.get("quantity"))),
                total=_to_float(_first(subtotals.get("net_revenue"), row.get("total"))),
            )
        )
    return items


def normalize_legacy_top_products(payload: List[LegacyTopSeller]) -> List[TopProductItem]:
    """映射 v3 top_sellers 的扁平数组。"""
    return [
        TopProductItem(
            product_id=_to_int(_first(_mapping(row).get("product_id"), _mapping(row).get("product"))),
            name=_first(_mapping(row).get("title"), _mapping(row).get("name")),
            quantity=_to_int(_mapping(row).get("quantity")),
            total=_to_float(_mapping(row).get("total")),
        )
        for row in _sequence(payload)
    ]


def _orders_fields(source: Mapping[str, Any]) -> dict:
    return {
        "orders_count": _to_int(source.get("orders_count")),
        "avg_order_value": _to_float(source.get("avg_order_value")),
        "net_revenue": _to_float(source.get("net_revenue")),
        "refunds": _to_float(source.get("refunds")),
    }


def normalize_modern_orders(payload: ModernOrdersResponse) -> OrdersStats:
    data = _mapping(payload)
    intervals = [
        OrdersIntervalPoint(
            date=_mapping(point).get("date"),
            **_orders_fields(_mapping(_mapping(point).get("subtotals"))),
        )
        for point in _sequence(data.get("intervals"))
    ]
    return OrdersStats(
        totals=OrdersTotals(**_orders_fields(_mapping(data.get("totals")))),
        intervals=intervals,
    )


def normalize_modern_product_stats(payload: ModernProductStatsResponse) -> List[ProductStatsPoint]:
    """
    功能说明:
        将每个时间桶下的商品子行展平，先按桶顺序、再按子行顺序输出。
    参数:
        payload (ModernProductStatsResponse): 原始 JSON。
    返回:
        List[ProductStatsPoint]: 每个 (日期, 商品) 一条记录。
    """
    points: List[ProductStatsPoint] = []
    for raw_bucket in _sequence(_mapping(payload).get("intervals")):
        bucket = _mapping(raw_bucket)
        bucket_date: Optional[str] = bucket.get("date")
        entries = _sequence(_mapping(bucket.get("subtotals")).get("products")) or _sequence(bucket.get("products"))
        for raw_entry in entries:
            entry = _mapping(raw_entry)
            points.append(
                ProductStatsPoint(
                    date=bucket_date,
                    product_id=_to_int(_first(entry.get("product_id"), entry.get("id"))),
                    quantity=_to_int(_first(entry.get("items_sold"), entry.get("quantity"))),
                    net_revenue=_to_float(_first(entry.get("net_revenue"), entry.get("total"))),
                )
            )
    return points
