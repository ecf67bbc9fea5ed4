import json

import pytest

from commerce_reports import cli
from commerce_reports.services import create_service_context

from conftest import ANALYTICS, V3


def test_parse_args_and_product_ids():
    args = cli.parse_args(["product-stats", "--range", "qtd", "--products", "1, 2,3"])
    assert args.report == "product-stats"
    assert args.range_token == "qtd"
    assert cli.parse_product_ids(args.products) == [1, 2, 3]
    assert cli.parse_product_ids(None) is None


@pytest.mark.asyncio
async def test_run_report_top_products(fake_store, app_config):
    fake_store.route(ANALYTICS + "/reports/products/stats", status=500)
    fake_store.route(V3 + "/reports/top_sellers", json=[{"title": "Hoodie", "product_id": 9, "quantity": 3, "total": "90"}])
    args = cli.parse_args(
        ["top-products", "--range", "custom", "--after", "2024-01-01", "--before", "2024-01-31", "--limit", "5"]
    )

    async with fake_store.client() as client:
        text, payload = await cli.run_report(create_service_context(app_config, http_client=client), args)

    assert "1. Hoodie (#9) - Revenue $90.00, Units 3" in text
    assert payload == {
        "range": {"after": "2024-01-01", "before": "2024-01-31"},
        "items": [{"product_id": 9, "name": "Hoodie", "quantity": 3, "total": 90.0}],
    }
    json.dumps(payload)


@pytest.mark.asyncio
async def test_run_report_trend(fake_store, app_config):
    fake_store.route(
        ANALYTICS + "/reports/revenue/stats",
        json={"intervals": [{"date": "2024-01-01", "subtotals": {"gross_sales": 4}}]},
    )
    args = cli.parse_args(["trend", "--metric", "total_sales", "--window", "2"])

    async with fake_store.client() as client:
        text, payload = await cli.run_report(create_service_context(app_config, http_client=client), args)

    assert "Metric total_sales: Sum 4.00, Avg 4.00, Latest growth n/a" in text
    assert payload["series"] == [{"date": "2024-01-01", "value": 4.0, "moving_average": 4.0}]
