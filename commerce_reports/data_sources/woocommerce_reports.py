"""WooCommerce 报表聚合器：先查新版 Analytics 接口，必要时回退到旧版 v3 报表。"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import httpx

from ..errors import UpstreamError
from ..reporting.normalizer import (
    normalize_legacy_revenue,
    normalize_legacy_top_products,
    normalize_modern_orders,
    normalize_modern_product_stats,
    normalize_modern_revenue,
    normalize_modern_top_products,
)
from ..utils.dates import ResolvedRange, resolve_range
from .base import (
    CredentialProvider,
    OrdersStats,
    ProductStatsPoint,
    RevenueStats,
    TopProductItem,
)
from .transport import ReportTransport

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = "day"
DEFAULT_TOP_LIMIT = 10


class WooCommerceReportAggregator:
    """
    对外提供营收、热销商品、订单与单品时间序列四类报表。

    回退策略并不对称：营收与热销商品存在旧版等价接口，两级都失败时抛出
    UpstreamError；订单统计与单品统计只有新版接口，失败时返回空结果。
    每次调用最多两次串行请求，不缓存、不重试，也不修改共享状态。
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        参数:
            credentials: 站点地址与 API 凭证。
            client: 可选的 httpx 客户端，便于复用连接或在测试中注入。
            timeout: 未注入客户端时的请求超时秒数。
        """
        base = credentials.site_url.rstrip("/")
        self._analytics_url = f"{base}/wp-json/wc-analytics"
        self._v3_url = f"{base}/wp-json/wc/v3"
        self._transport = ReportTransport(credentials, client=client, timeout=timeout)

    def resolve(
        self,
        range_token: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
    ) -> ResolvedRange:
        return resolve_range(range_token, after, before)

    async def get_revenue_stats(
        self,
        range_token: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        interval: str = DEFAULT_INTERVAL,
    ) -> RevenueStats:
        """
        功能说明:
            查询营收统计，新版接口失败时回退到 v3 sales 报表。
        参数:
            range_token (Optional[str]): 时间范围标记。
            after (Optional[str]): custom 模式起始时刻。
            before (Optional[str]): custom 模式结束时刻。
            interval (str): 聚合粒度 day/week/month。
        返回:
            RevenueStats: 统一模型下的营收统计。
        """
        window = self.resolve(range_token, after, before)
        response = await self._transport.get(
            f"{self._analytics_url}/reports/revenue/stats",
            {"after": window.after, "before": window.before, "interval": interval or DEFAULT_INTERVAL},
        )
        if response.ok:
            return normalize_modern_revenue(response.json)

        logger.warning("Revenue analytics returned %s, falling back to v3 sales report", response.status)
        legacy = await self._transport.get(
            f"{self._v3_url}/reports/sales",
            {"date_min": window.after, "date_max": window.before},
        )
        if not legacy.ok:
            raise UpstreamError("revenue stats", legacy.status, legacy.reason)
        return normalize_legacy_revenue(legacy.json)

    async def get_top_products(
        self,
        range_token: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        limit: int = DEFAULT_TOP_LIMIT,
    ) -> List[TopProductItem]:
        """
        功能说明:
            查询按净收入降序排列的热销商品，新版接口失败时回退到 v3 top_sellers。
        参数:
            range_token (Optional[str]): 时间范围标记。
            after (Optional[str]): custom 模式起始时刻。
            before (Optional[str]): custom 模式结束时刻。
            limit (int): 最多返回的商品数量。
        返回:
            List[TopProductItem]: 长度不超过 limit 的商品列表。
        """
        limit = limit or DEFAULT_TOP_LIMIT
        window = self.resolve(range_token, after, before)
        response = await self._transport.get(
            f"{self._analytics_url}/reports/products/stats",
            {
                "after": window.after,
                "before": window.before,
                "per_page": limit,
                "order_by": "net_revenue",
                "order": "desc",
            },
        )
        if response.ok:
            return normalize_modern_top_products(response.json)[:limit]

        logger.warning("Products analytics returned %s, falling back to v3 top sellers", response.status)
        legacy = await self._transport.get(
            f"{self._v3_url}/reports/top_sellers",
            {"after": window.after, "before": window.before, "per_page": limit},
        )
        if not legacy.ok:
            raise UpstreamError("top products", legacy.status, legacy.reason)
        return normalize_legacy_top_products(legacy.json)[:limit]

    async def get_orders_stats(
        self,
        range_token: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        interval: str = DEFAULT_INTERVAL,
    ) -> OrdersStats:
        """查询订单统计；v3 中没有等价报表，失败时返回空的 OrdersStats。"""
        window = self.resolve(range_token, after, before)
        response = await self._transport.get(
            f"{self._analytics_url}/reports/orders/stats",
            {"after": window.after, "before": window.before, "interval": interval or DEFAULT_INTERVAL},
        )
        if not response.ok:
            logger.warning("Orders analytics returned %s, returning empty stats", response.status)
            return OrdersStats()
        return normalize_modern_orders(response.json)

    async def get_product_stats(
        self,
        product_ids: Optional[Sequence[int]] = None,
        range_token: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        interval: str = DEFAULT_INTERVAL,
    ) -> List[ProductStatsPoint]:
        """
        功能说明:
            查询单品时间序列并展平；只有新版接口，失败时返回空列表。
        参数:
            product_ids (Optional[Sequence[int]]): 需要过滤的商品 ID，以逗号拼接传给上游。
            range_token (Optional[str]): 时间范围标记。
            after (Optional[str]): custom 模式起始时刻。
            before (Optional[str]): custom 模式结束时刻。
            interval (str): 聚合粒度。
        返回:
            List[ProductStatsPoint]: 每个 (日期, 商品) 一条记录。
        """
        window = self.resolve(range_token, after, before)
        params = {"after": window.after, "before": window.before, "interval": interval or DEFAULT_INTERVAL}
        if product_ids:
            params["products"] = ",".join(str(product_id) for product_id in product_ids)
        response = await self._transport.get(f"{self._analytics_url}/reports/products/stats", params)
        if not response.ok:
            logger.warning("Product stats analytics returned %s, returning no points", response.status)
            return []
        return normalize_modern_product_stats(response.json)
