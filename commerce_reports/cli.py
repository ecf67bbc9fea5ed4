"""WooCommerce 报表的命令行入口，查询报表并输出文本或 JSON。"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import AppConfig
from .metrics.calculations import REVENUE_METRICS, build_revenue_trend
from .reporting.formatter import (
    format_orders_report,
    format_product_stats_report,
    format_revenue_report,
    format_top_products_report,
    format_trend_report,
    orders_stats_to_dict,
    product_stats_to_list,
    range_to_dict,
    revenue_stats_to_dict,
    revenue_trend_to_dict,
    top_products_to_list,
)
from .services import ServiceContext, build_aggregator, create_service_context
from .utils.dates import RANGE_TOKENS

REPORTS = ("revenue", "top-products", "orders", "product-stats", "trend")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    功能说明:
        构建并解析命令行参数，返回解析后的命名空间。
    参数:
        argv (Optional[List[str]]): 参数列表，缺省读取 sys.argv。
    返回:
        argparse.Namespace: 包含用户指定的运行选项。
    """
    parser = argparse.ArgumentParser(description="WooCommerce reports runner")
    parser.add_argument("report", choices=REPORTS, help="Which report to fetch.")
    parser.add_argument("--range", dest="range_token", choices=RANGE_TOKENS, help="Symbolic time range.")
    parser.add_argument("--after", type=str, help="Custom range start, ISO-8601.")
    parser.add_argument("--before", type=str, help="Custom range end, ISO-8601.")
    parser.add_argument("--interval", choices=["day", "week", "month"], help="Interval bucket size.")
    parser.add_argument("--limit", type=int, help="How many top products to return.")
    parser.add_argument("--products", type=str, help="Comma separated product ids for product-stats.")
    parser.add_argument("--metric", choices=REVENUE_METRICS, default="net_revenue", help="Metric for trend.")
    parser.add_argument("--window", type=int, default=3, help="Moving average window for trend.")
    parser.add_argument("--output-json", type=Path, help="Path to save the JSON payload.")
    parser.add_argument("--site-url", help="Override WP_SITE_URL.")
    parser.add_argument("--consumer-key", help="Override WC_CONSUMER_KEY.")
    parser.add_argument("--consumer-secret", help="Override WC_CONSUMER_SECRET.")
    return parser.parse_args(argv)


def parse_product_ids(value: Optional[str]) -> Optional[List[int]]:
    if not value:
        return None
    return [int(item) for item in value.split(",") if item.strip()]


async def run_report(context: ServiceContext, args: argparse.Namespace) -> tuple[str, Dict[str, Any]]:
    """
    功能说明:
        根据参数执行一次报表查询，返回文本报告与 JSON 载荷。
    参数:
        context (ServiceContext): 业务上下文。
        args (argparse.Namespace): 命令行参数。
    返回:
        tuple[str, Dict[str, Any]]: (文本报告, JSON 载荷)。
    """
    aggregator = build_aggregator(
        context,
        site_url=args.site_url,
        consumer_key=args.consumer_key,
        consumer_secret=args.consumer_secret,
    )
    reports = context.config.reports
    window = aggregator.resolve(args.range_token or reports.default_range, args.after, args.before)
    interval = args.interval or reports.default_interval
    payload: Dict[str, Any] = {"range": range_to_dict(window)}

    if args.report == "revenue":
        stats = await aggregator.get_revenue_stats("custom", window.after, window.before, interval)
        payload.update(revenue_stats_to_dict(stats))
        return format_revenue_report(stats, window), payload
    if args.report == "top-products":
        items = await aggregator.get_top_products(
            "custom", window.after, window.before, args.limit or reports.top_products_limit
        )
        payload["items"] = top_products_to_list(items)
        return format_top_products_report(items, window), payload
    if args.report == "orders":
        orders = await aggregator.get_orders_stats("custom", window.after, window.before, interval)
        payload.update(orders_stats_to_dict(orders))
        return format_orders_report(orders, window), payload
    if args.report == "product-stats":
        points = await aggregator.get_product_stats(
            parse_product_ids(args.products), "custom", window.after, window.before, interval
        )
        payload["points"] = product_stats_to_list(points)
        return format_product_stats_report(points, window), payload

    stats = await aggregator.get_revenue_stats("custom", window.after, window.before, interval)
    trend = build_revenue_trend(stats, metric=args.metric, window=args.window)
    payload.update(revenue_trend_to_dict(trend))
    return format_trend_report(trend, window), payload


def run_cli(argv: Optional[List[str]] = None) -> None:
    """
    功能说明:
        命令行主入口：读取参数与环境配置、查询报表、输出文本并按需写出 JSON。
    """
    args = parse_args(argv)
    context = create_service_context(AppConfig.from_env())
    report_text, payload = asyncio.run(run_report(context, args))
    print(report_text)

    if args.output_json:
        args.output_json.parent.mkdir(parents=True, exist_ok=True)
        args.output_json.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"JSON report written to: {args.output_json}")


if __name__ == "__main__":  # pragma: no cover
    run_cli()
