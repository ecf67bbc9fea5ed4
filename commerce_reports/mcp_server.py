"""Commerce Reports MCP 服务模块，基于 FastMCP 暴露 WooCommerce 报表工具与资源。"""

import argparse
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import MethodType
from typing import Any, Dict, List, Literal, Optional, cast

from typing_extensions import TypedDict

from mcp.server.fastmcp import Context, FastMCP
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.routing import Route

from commerce_reports.config import AppConfig
from commerce_reports.services import (
    ServiceContext,
    analyze_revenue_trend as _analyze_revenue_trend,
    create_service_context,
    fetch_orders_stats as _fetch_orders_stats,
    fetch_product_stats as _fetch_product_stats,
    fetch_revenue_stats as _fetch_revenue_stats,
    fetch_top_products as _fetch_top_products,
)
from commerce_reports.utils.dates import RangeToken


logger = logging.getLogger(__name__)
logging.basicConfig(level=os.getenv('MCP_SERVER_LOG_LEVEL', 'INFO').upper(), format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

GLOBAL_SERVICE_CONTEXT: Optional[ServiceContext] = None

Interval = Literal["day", "week", "month"]


class RangePayload(TypedDict):
    after: str
    before: str


class RevenueTotalsPayload(TypedDict, total=False):
    total_sales: float
    net_revenue: float
    orders_count: int
    items_sold: int
    refunds: float
    taxes: float
    shipping: float
    discounts: float


class RevenueIntervalPayload(RevenueTotalsPayload, total=False):
    date: Optional[str]


class RevenueStatsResult(TypedDict):
    range: RangePayload
    totals: RevenueTotalsPayload
    intervals: List[RevenueIntervalPayload]


class TopProductPayload(TypedDict):
    product_id: int
    name: Optional[str]
    quantity: int
    total: float


class TopProductsResult(TypedDict):
    range: RangePayload
    items: List[TopProductPayload]


class OrdersTotalsPayload(TypedDict, total=False):
    orders_count: int
    avg_order_value: float
    net_revenue: float
    refunds: float


class OrdersIntervalPayload(OrdersTotalsPayload, total=False):
    date: Optional[str]


class OrdersStatsResult(TypedDict):
    range: RangePayload
    totals: OrdersTotalsPayload
    intervals: List[OrdersIntervalPayload]


class ProductStatsPointPayload(TypedDict):
    date: Optional[str]
    product_id: int
    quantity: int
    net_revenue: float


class ProductStatsResult(TypedDict):
    range: RangePayload
    points: List[ProductStatsPointPayload]


class TrendPointPayload(TypedDict):
    date: Optional[str]
    value: float
    moving_average: float


class TrendSummaryPayload(TypedDict):
    sum: float
    avg: float


class RevenueTrendResult(TypedDict):
    range: RangePayload
    metric: str
    window: int
    series: List[TrendPointPayload]
    summary: TrendSummaryPayload
    growth: Optional[float]


class ReportsAppContext:
    """封装 MCP 生命周期中共享的业务依赖。

    Attributes:
        service_context (ServiceContext): 包含配置与可选 HTTP 客户端的业务上下文。
    """

    def __init__(self, service_context: ServiceContext) -> None:
        self.service_context = service_context


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[ReportsAppContext]:
    """FastMCP 生命周期钩子，创建并共享业务上下文。

    Args:
        server (FastMCP): FastMCP 框架传入的服务器实例，本实现中仅为保持签名一致。

    Yields:
        ReportsAppContext: 包含业务依赖的上下文对象。
    """

    config = AppConfig.from_env()
    if config.woocommerce is None:
        logger.warning("WooCommerce credentials are not configured; tools require per-call credentials.")
    service_context = create_service_context(config)
    global GLOBAL_SERVICE_CONTEXT
    GLOBAL_SERVICE_CONTEXT = service_context
    yield ReportsAppContext(service_context=service_context)


mcp = FastMCP(
    name="Commerce Reports",
    instructions=(
        "Expose WooCommerce revenue, top product, order and per-product statistics through MCP tools. "
        "Ranges accept last_7_days, last_30_days, mtd, qtd, ytd or custom with explicit after/before."
    ),
    lifespan=app_lifespan,
    streamable_http_path="/mcp",
)

_base_streamable_http_app = mcp.streamable_http_app


def _streamable_http_app_with_cors(self: FastMCP):
    app = _base_streamable_http_app()

    async def _handle_options(request):
        requested_headers = request.headers.get("Access-Control-Request-Headers", "")
        return Response(
            status_code=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
                "Access-Control-Allow-Headers": requested_headers or "*",
                "Access-Control-Max-Age": "600",
            },
        )

    app.router.routes.insert(
        0,
        Route(self.settings.streamable_http_path, _handle_options, methods=["OPTIONS"]),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["MCP-Session-Id"],
    )
    return app


mcp.streamable_http_app = MethodType(_streamable_http_app_with_cors, mcp)

# Inspector 会读取该列表自动安装调试所需的三方依赖。
mcp.dependencies = ["httpx"]


def _service(ctx: Context) -> ServiceContext:
    """从请求上下文里提取共享业务依赖。

    Args:
        ctx (Context): FastMCP 提供的请求上下文。

    Returns:
        ServiceContext: 生命周期中构建的业务上下文实例。
    """

    try:
        return ctx.request_context.lifespan_context.service_context
    except (AttributeError, ValueError):
        pass
    if GLOBAL_SERVICE_CONTEXT is not None:
        return GLOBAL_SERVICE_CONTEXT
    raise RuntimeError("Service context is not available; lifespan may not be initialized.")


def _credential_overrides(
    site_url: Optional[str],
    wc_consumer_key: Optional[str],
    wc_consumer_secret: Optional[str],
) -> Dict[str, Optional[str]]:
    return {
        "site_url": site_url,
        "consumer_key": wc_consumer_key,
        "consumer_secret": wc_consumer_secret,
    }


@mcp.resource("commerce-reports://config", mime_type="application/json")
def read_configuration() -> Dict[str, Any]:
    """返回当前报表默认参数，不包含任何凭证。

    Returns:
        Dict[str, Any]: 默认时间范围、粒度、TopN 以及凭证是否已配置。
    """

    config = GLOBAL_SERVICE_CONTEXT.config if GLOBAL_SERVICE_CONTEXT else AppConfig.from_env()
    return {
        "default_range": config.reports.default_range,
        "default_interval": config.reports.default_interval,
        "top_products_limit": config.reports.top_products_limit,
        "credentials_configured": config.woocommerce is not None,
        "site_url": config.woocommerce.site_url if config.woocommerce else None,
    }


@mcp.tool(name="wc_revenue_stats")
async def tool_revenue_stats(
    ctx: Context,
    range: Optional[RangeToken] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[Interval] = None,
    site_url: Optional[str] = None,
    wc_consumer_key: Optional[str] = None,
    wc_consumer_secret: Optional[str] = None,
) -> RevenueStatsResult:
    """查询时间窗口内的营收统计，Analytics 不可用时回退到旧版 sales 报表。

    Args:
        ctx (Context): FastMCP 请求上下文。
        range (Optional[RangeToken]): 时间范围标记，custom 需同时提供 after/before。
        after (Optional[str]): custom 起始时刻（ISO-8601）。
        before (Optional[str]): custom 结束时刻（ISO-8601）。
        interval (Optional[Interval]): 聚合粒度。
        site_url (Optional[str]): 覆盖环境变量中的站点地址。
        wc_consumer_key (Optional[str]): 覆盖环境变量中的 consumer key。
        wc_consumer_secret (Optional[str]): 覆盖环境变量中的 consumer secret。

    Returns:
        RevenueStatsResult: 解析后的时间范围、汇总与时间桶。
    """

    result = await _fetch_revenue_stats(
        _service(ctx),
        range_token=range,
        after=after,
        before=before,
        interval=interval,
        **_credential_overrides(site_url, wc_consumer_key, wc_consumer_secret),
    )
    return cast(RevenueStatsResult, result)


@mcp.tool(name="wc_top_products")
async def tool_top_products(
    ctx: Context,
    range: Optional[RangeToken] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    limit: Optional[int] = None,
    site_url: Optional[str] = None,
    wc_consumer_key: Optional[str] = None,
    wc_consumer_secret: Optional[str] = None,
) -> TopProductsResult:
    """按净收入降序返回热销商品，Analytics 不可用时回退到旧版 top_sellers 报表。

    Args:
        ctx (Context): FastMCP 请求上下文。
        range (Optional[RangeToken]): 时间范围标记。
        after (Optional[str]): custom 起始时刻。
        before (Optional[str]): custom 结束时刻。
        limit (Optional[int]): 返回数量上限，默认 10。

    Returns:
        TopProductsResult: 时间范围与商品列表。
    """

    result = await _fetch_top_products(
        _service(ctx),
        range_token=range,
        after=after,
        before=before,
        limit=limit,
        **_credential_overrides(site_url, wc_consumer_key, wc_consumer_secret),
    )
    return cast(TopProductsResult, result)


@mcp.tool(name="wc_orders_stats")
async def tool_orders_stats(
    ctx: Context,
    range: Optional[RangeToken] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[Interval] = None,
    site_url: Optional[str] = None,
    wc_consumer_key: Optional[str] = None,
    wc_consumer_secret: Optional[str] = None,
) -> OrdersStatsResult:
    """查询订单统计；Analytics 不可用时返回空的 totals 与 intervals。"""

    result = await _fetch_orders_stats(
        _service(ctx),
        range_token=range,
        after=after,
        before=before,
        interval=interval,
        **_credential_overrides(site_url, wc_consumer_key, wc_consumer_secret),
    )
    return cast(OrdersStatsResult, result)


@mcp.tool(name="wc_product_stats")
async def tool_product_stats(
    ctx: Context,
    product_ids: Optional[List[int]] = None,
    range: Optional[RangeToken] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[Interval] = None,
    site_url: Optional[str] = None,
    wc_consumer_key: Optional[str] = None,
    wc_consumer_secret: Optional[str] = None,
) -> ProductStatsResult:
    """查询单品时间序列，每个 (日期, 商品) 一行；Analytics 不可用时返回空列表。

    Args:
        ctx (Context): FastMCP 请求上下文。
        product_ids (Optional[List[int]]): 需要过滤的商品 ID。
        range (Optional[RangeToken]): 时间范围标记。
        after (Optional[str]): custom 起始时刻。
        before (Optional[str]): custom 结束时刻。
        interval (Optional[Interval]): 聚合粒度。

    Returns:
        ProductStatsResult: 时间范围与展平后的记录。
    """

    result = await _fetch_product_stats(
        _service(ctx),
        product_ids=product_ids,
        range_token=range,
        after=after,
        before=before,
        interval=interval,
        **_credential_overrides(site_url, wc_consumer_key, wc_consumer_secret),
    )
    return cast(ProductStatsResult, result)


@mcp.tool(name="wc_revenue_trend")
async def tool_revenue_trend(
    ctx: Context,
    range: Optional[RangeToken] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    interval: Optional[Interval] = None,
    metric: str = "net_revenue",
    window: int = 3,
    site_url: Optional[str] = None,
    wc_consumer_key: Optional[str] = None,
    wc_consumer_secret: Optional[str] = None,
) -> RevenueTrendResult:
    """基于营收时间桶计算单个指标的移动平均、合计均值与最新环比。

    Args:
        ctx (Context): FastMCP 请求上下文。
        metric (str): 营收指标名称，例如 net_revenue、total_sales。
        window (int): 移动平均窗口，默认 3。

    Returns:
        RevenueTrendResult: 趋势序列及汇总。
    """

    result = await _analyze_revenue_trend(
        _service(ctx),
        range_token=range,
        after=after,
        before=before,
        interval=interval,
        metric=metric,
        window=window,
        **_credential_overrides(site_url, wc_consumer_key, wc_consumer_secret),
    )
    return cast(RevenueTrendResult, result)


def main(argv: Optional[list[str]] = None) -> None:
    """命令行入口，支持选择传输方式与监听参数。

    Args:
        argv (Optional[list[str]]): 手动传入的参数列表，通常由命令行自动提供。
    """

    parser = argparse.ArgumentParser(description="Run the Commerce Reports MCP server.")
    parser.add_argument(
        "transport",
        nargs="?",
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
        help="Transport mechanism to expose (default: stdio).",
    )
    parser.add_argument("--host", default=None, help="Optional host binding for HTTP-based transports.")
    parser.add_argument("--port", type=int, default=None, help="Optional port binding for HTTP-based transports.")
    args = parser.parse_args(argv)

    if args.host:
        mcp.settings.host = args.host
    if args.port is not None:
        mcp.settings.port = args.port

    logger.info("Starting MCP server transport=%s host=%s port=%s", args.transport, mcp.settings.host, mcp.settings.port)
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
