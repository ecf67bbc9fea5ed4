"""
Tests for the service layer used by the MCP tools and the CLI.
"""
import pytest

from commerce_reports.config import AppConfig
from commerce_reports.errors import MissingCredentialsError
from commerce_reports.services import (
    analyze_revenue_trend,
    build_aggregator,
    create_service_context,
    fetch_orders_stats,
    fetch_product_stats,
    fetch_revenue_stats,
    fetch_top_products,
)

from conftest import ANALYTICS, V3

AFTER = "2024-01-01T00:00:00Z"
BEFORE = "2024-01-08T00:00:00Z"


@pytest.mark.asyncio
async def test_revenue_payload_includes_resolved_range(fake_store, app_config):
    fake_store.route(
        ANALYTICS + "/reports/revenue/stats",
        json={"totals": {"gross_sales": 10}, "intervals": [{"date": "2024-01-01", "subtotals": {}}]},
    )

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await fetch_revenue_stats(context, range_token="custom", after=AFTER, before=BEFORE)

    assert result["range"] == {"after": AFTER, "before": BEFORE}
    assert result["totals"]["total_sales"] == 10
    assert result["intervals"][0]["date"] == "2024-01-01"
    assert fake_store.requests[0].url.params["interval"] == "day"


@pytest.mark.asyncio
async def test_legacy_revenue_payload_has_no_missing_fields(fake_store, app_config):
    fake_store.route(ANALYTICS + "/reports/revenue/stats", status=500)
    fake_store.route(V3 + "/reports/sales", json={"total_sales": "50", "sales": []})

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await fetch_revenue_stats(context, range_token="custom", after=AFTER, before=BEFORE)

    assert result["totals"] == {"total_sales": 50}
    assert result["intervals"] == []


@pytest.mark.asyncio
async def test_top_products_use_configured_limit(fake_store, app_config):
    app_config.reports.top_products_limit = 2
    fake_store.route(ANALYTICS + "/reports/products/stats", json={"rows": [{"product_id": n} for n in range(5)]})

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await fetch_top_products(context, range_token="mtd")

    assert len(result["items"]) == 2
    assert set(result["items"][0]) == {"product_id", "name", "quantity", "total"}
    assert fake_store.requests[0].url.params["per_page"] == "2"


@pytest.mark.asyncio
async def test_orders_payload_degrades_to_empty(fake_store, app_config):
    fake_store.route(ANALYTICS + "/reports/orders/stats", status=500)

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await fetch_orders_stats(context, range_token="custom", after=AFTER, before=BEFORE)

    assert result["totals"] == {}
    assert result["intervals"] == []


@pytest.mark.asyncio
async def test_product_stats_payload(fake_store, app_config):
    fake_store.route(
        ANALYTICS + "/reports/products/stats",
        json={"intervals": [{"date": "2024-01-01", "products": [{"product_id": 4, "quantity": 1, "total": 9}]}]},
    )

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await fetch_product_stats(context, product_ids=[4], interval="week")

    assert result["points"] == [{"date": "2024-01-01", "product_id": 4, "quantity": 1, "net_revenue": 9.0}]
    assert fake_store.requests[0].url.params["interval"] == "week"


@pytest.mark.asyncio
async def test_revenue_trend_payload(fake_store, app_config):
    fake_store.route(
        ANALYTICS + "/reports/revenue/stats",
        json={
            "intervals": [
                {"date": "2024-01-01", "subtotals": {"net_revenue": 100}},
                {"date": "2024-01-02", "subtotals": {"net_revenue": 150}},
            ]
        },
    )

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        result = await analyze_revenue_trend(context, range_token="custom", after=AFTER, before=BEFORE, window=2)

    assert result["metric"] == "net_revenue"
    assert result["summary"] == {"sum": 250.0, "avg": 125.0}
    assert result["growth"] == pytest.approx(0.5)
    assert result["series"][1] == {"date": "2024-01-02", "value": 150.0, "moving_average": 125.0}


@pytest.mark.asyncio
async def test_per_call_credentials_override_configuration(fake_store, app_config):
    fake_store.route(ANALYTICS + "/reports/orders/stats", json={})

    async with fake_store.client() as client:
        context = create_service_context(app_config, http_client=client)
        await fetch_orders_stats(context, consumer_key="ck_override")

    params = fake_store.requests[0].url.params
    assert params["consumer_key"] == "ck_override"
    assert params["consumer_secret"] == "cs_test"


def test_missing_credentials_raise():
    context = create_service_context(AppConfig())
    with pytest.raises(MissingCredentialsError, match="WC_CONSUMER_KEY"):
        build_aggregator(context, site_url="https://shop.example.com")


def test_credentials_can_come_from_environment(monkeypatch):
    monkeypatch.setenv("WP_SITE_URL", "https://env.example.com")
    monkeypatch.setenv("WC_CONSUMER_KEY", "ck_env")
    monkeypatch.setenv("WC_CONSUMER_SECRET", "cs_env")

    aggregator = build_aggregator(create_service_context(AppConfig()))
    assert aggregator._analytics_url == "https://env.example.com/wp-json/wc-analytics"
