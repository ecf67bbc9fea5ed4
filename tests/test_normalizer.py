"""
Tests for mapping raw report payloads into the unified model.
"""
from commerce_reports.data_sources.base import ProductStatsPoint, TopProductItem
from commerce_reports.reporting.normalizer import (
    normalize_legacy_revenue,
    normalize_legacy_top_products,
    normalize_modern_orders,
    normalize_modern_product_stats,
    normalize_modern_revenue,
    normalize_modern_top_products,
)


class TestRevenue:
    """Revenue payloads from both API generations."""

    def test_modern_revenue_fills_missing_fields_with_zero(self):
        stats = normalize_modern_revenue(
            {
                "totals": {"gross_sales": 100, "net_revenue": 90},
                "intervals": [{"date": "2024-01-01", "subtotals": {"gross_sales": 10}}],
            }
        )

        assert stats.totals.total_sales == 100
        assert stats.totals.net_revenue == 90
        for name in ("orders_count", "items_sold", "refunds", "taxes", "shipping", "discounts"):
            assert getattr(stats.totals, name) == 0
        assert stats.intervals[0].date == "2024-01-01"
        assert stats.intervals[0].total_sales == 10
        assert stats.intervals[0].net_revenue == 0

    def test_modern_revenue_coerces_strings_and_garbage(self):
        stats = normalize_modern_revenue(
            {"totals": {"gross_sales": "12.5", "taxes": None, "shipping": "n/a", "refunds": -3}}
        )

        assert stats.totals.total_sales == 12.5
        assert stats.totals.taxes == 0
        assert stats.totals.shipping == 0
        assert stats.totals.refunds == -3
        assert stats.intervals == []

    def test_modern_revenue_keeps_upstream_interval_order(self):
        stats = normalize_modern_revenue(
            {
                "intervals": [
                    {"date": "2024-01-03", "subtotals": {"gross_sales": 3}},
                    {"date": "2024-01-01", "subtotals": {"gross_sales": 1}},
                ]
            }
        )
        assert [point.date for point in stats.intervals] == ["2024-01-03", "2024-01-01"]

    def test_legacy_revenue_only_reports_total_sales(self):
        stats = normalize_legacy_revenue(
            {"total_sales": "50", "sales": [{"date": "2024-01-02", "total_sales": "5"}]}
        )

        assert stats.totals.total_sales == 50
        assert stats.totals.net_revenue is None
        assert stats.totals.orders_count is None
        assert stats.intervals[0].date == "2024-01-02"
        assert stats.intervals[0].total_sales == 5
        assert stats.intervals[0].net_revenue is None

    def test_legacy_revenue_accepts_single_element_list(self):
        stats = normalize_legacy_revenue([{"total_sales": "7.25"}])
        assert stats.totals.total_sales == 7.25
        assert stats.intervals == []


class TestTopProducts:
    """Top-product payloads."""

    def test_modern_rows_from_first_non_empty_collection(self):
        items = normalize_modern_top_products(
            {
                "data": [],
                "rows": [
                    {
                        "extended_info": {"product_id": 11, "name": "Mug"},
                        "subtotals": {"items_sold": 4, "net_revenue": "40.5"},
                    }
                ],
                "items": [{"product_id": 99}],
            }
        )
        assert items == [TopProductItem(product_id=11, name="Mug", quantity=4, total=40.5)]

    def test_modern_row_field_fallbacks(self):
        items = normalize_modern_top_products(
            {"intervals": [{"id": 5, "name": "Cap", "quantity": "2", "total": 20}]}
        )
        assert items == [TopProductItem(product_id=5, name="Cap", quantity=2, total=20.0)]

    def test_modern_without_rows_is_empty(self):
        assert normalize_modern_top_products({"totals": {}}) == []

    def test_legacy_top_sellers(self):
        items = normalize_legacy_top_products(
            [
                {"title": "Shirt", "product_id": 3, "quantity": 9},
                {"name": "Socks", "product": "8", "quantity": "1", "total": "4.00"},
            ]
        )
        assert items == [
            TopProductItem(product_id=3, name="Shirt", quantity=9, total=0.0),
            TopProductItem(product_id=8, name="Socks", quantity=1, total=4.0),
        ]

    def test_legacy_non_list_payload_is_empty(self):
        assert normalize_legacy_top_products({"message": "nope"}) == []


def test_modern_orders():
    stats = normalize_modern_orders(
        {
            "totals": {"orders_count": 3, "avg_order_value": "33.3"},
            "intervals": [{"date": "2024-01-01", "subtotals": {"orders_count": 3, "net_revenue": 100}}],
        }
    )
    assert stats.totals.orders_count == 3
    assert stats.totals.avg_order_value == 33.3
    assert stats.totals.net_revenue == 0
    assert stats.totals.refunds == 0
    assert stats.intervals[0].date == "2024-01-01"
    assert stats.intervals[0].net_revenue == 100
    assert stats.intervals[0].avg_order_value == 0


def test_product_stats_are_flattened_in_bucket_then_row_order():
    points = normalize_modern_product_stats(
        {
            "intervals": [
                {
                    "date": "2024-01-01",
                    "subtotals": {
                        "products": [
                            {"product_id": 1, "items_sold": 2, "net_revenue": 20},
                            {"product_id": 2, "items_sold": 1, "net_revenue": 5},
                        ]
                    },
                },
                {
                    "date": "2024-01-02",
                    "products": [
                        {"id": 1, "quantity": 3, "total": "30"},
                        {"id": 2},
                    ],
                },
            ]
        }
    )

    assert points == [
        ProductStatsPoint(date="2024-01-01", product_id=1, quantity=2, net_revenue=20.0),
        ProductStatsPoint(date="2024-01-01", product_id=2, quantity=1, net_revenue=5.0),
        ProductStatsPoint(date="2024-01-02", product_id=1, quantity=3, net_revenue=30.0),
        ProductStatsPoint(date="2024-01-02", product_id=2, quantity=0, net_revenue=0.0),
    ]


def test_product_stats_bucket_without_products():
    assert normalize_modern_product_stats({"intervals": [{"date": "2024-01-01", "subtotals": {}}]}) == []
