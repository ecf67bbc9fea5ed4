from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .config import AppConfig, WooCommerceCredentialConfig, resolve_woocommerce_credentials
from .data_sources.woocommerce_reports import WooCommerceReportAggregator
from .metrics.calculations import build_revenue_trend
from .reporting.formatter import (
    orders_stats_to_dict,
    product_stats_to_list,
    range_to_dict,
    revenue_stats_to_dict,
    revenue_trend_to_dict,
    top_products_to_list,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    config: AppConfig
    http_client: Optional[httpx.AsyncClient] = None


def create_service_context(
    config: AppConfig,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ServiceContext:
    return ServiceContext(config=config, http_client=http_client)


def _credentials(
    context: ServiceContext,
    site_url: Optional[str],
    consumer_key: Optional[str],
    consumer_secret: Optional[str],
) -> WooCommerceCredentialConfig:
    configured = context.config.woocommerce
    if configured is not None:
        return resolve_woocommerce_credentials(
            site_url or configured.site_url,
            consumer_key or configured.consumer_key,
            consumer_secret or configured.consumer_secret,
        )
    return resolve_woocommerce_credentials(site_url, consumer_key, consumer_secret)


def build_aggregator(
    context: ServiceContext,
    *,
    site_url: Optional[str] = None,
    consumer_key: Optional[str] = None,
    consumer_secret: Optional[str] = None,
) -> WooCommerceReportAggregator:
    credentials = _credentials(context, site_url, consumer_key, consumer_secret)
    return WooCommerceReportAggregator(
        credentials,
        client=context.http_client,
        timeout=context.config.reports.request_timeout,
    )


async def fetch_revenue_stats(
    context: ServiceContext,
    *,
    range_token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[str] = None,
    **credentials: Optional[str],
) -> Dict[str, Any]:
    aggregator = build_aggregator(context, **credentials)
    window = aggregator.resolve(range_token or context.config.reports.default_range, after, before)
    stats = await aggregator.get_revenue_stats(
        "custom",
        window.after,
        window.before,
        interval=interval or context.config.reports.default_interval,
    )
    return {"range": range_to_dict(window), **revenue_stats_to_dict(stats)}


async def fetch_top_products(
    context: ServiceContext,
    *,
    range_token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    limit: Optional[int] = None,
    **credentials: Optional[str],
) -> Dict[str, Any]:
    aggregator = build_aggregator(context, **credentials)
    window = aggregator.resolve(range_token or context.config.reports.default_range, after, before)
    items = await aggregator.get_top_products(
        "custom",
        window.after,
        window.before,
        limit=limit or context.config.reports.top_products_limit,
    )
    return {"range": range_to_dict(window), "items": top_products_to_list(items)}


async def fetch_orders_stats(
    context: ServiceContext,
    *,
    range_token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[str] = None,
    **credentials: Optional[str],
) -> Dict[str, Any]:
    aggregator = build_aggregator(context, **credentials)
    window = aggregator.resolve(range_token or context.config.reports.default_range, after, before)
    stats = await aggregator.get_orders_stats(
        "custom",
        window.after,
        window.before,
        interval=interval or context.config.reports.default_interval,
    )
    return {"range": range_to_dict(window), **orders_stats_to_dict(stats)}


async def fetch_product_stats(
    context: ServiceContext,
    *,
    product_ids: Optional[List[int]] = None,
    range_token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[str] = None,
    **credentials: Optional[str],
) -> Dict[str, Any]:
    aggregator = build_aggregator(context, **credentials)
    window = aggregator.resolve(range_token or context.config.reports.default_range, after, before)
    points = await aggregator.get_product_stats(
        product_ids,
        "custom",
        window.after,
        window.before,
        interval=interval or context.config.reports.default_interval,
    )
    return {"range": range_to_dict(window), "points": product_stats_to_list(points)}


async def analyze_revenue_trend(
    context: ServiceContext,
    *,
    range_token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[str] = None,
    metric: str = "net_revenue",
    window: int = 3,
    **credentials: Optional[str],
) -> Dict[str, Any]:
    aggregator = build_aggregator(context, **credentials)
    resolved = aggregator.resolve(range_token or context.config.reports.default_range, after, before)
    stats = await aggregator.get_revenue_stats(
        "custom",
        resolved.after,
        resolved.before,
        interval=interval or context.config.reports.default_interval,
    )
    trend = build_revenue_trend(stats, metric=metric, window=window)
    logger.info("Revenue trend metric=%s points=%d", metric, len(trend.points))
    return {"range": range_to_dict(resolved), **revenue_trend_to_dict(trend)}
