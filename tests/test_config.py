import pytest

from commerce_reports.config import (
    AppConfig,
    ReportsConfig,
    WooCommerceCredentialConfig,
    resolve_woocommerce_credentials,
)
from commerce_reports.errors import MissingCredentialsError, UpstreamError


def test_credentials_from_env(monkeypatch):
    monkeypatch.setenv("WP_SITE_URL", "https://shop.example.com")
    monkeypatch.setenv("WC_CONSUMER_KEY", "ck")
    monkeypatch.setenv("WC_CONSUMER_SECRET", "cs")

    assert WooCommerceCredentialConfig.from_env() == WooCommerceCredentialConfig("https://shop.example.com", "ck", "cs")


def test_explicit_credentials_win_over_env(monkeypatch):
    monkeypatch.setenv("WP_SITE_URL", "https://env.example.com")
    monkeypatch.setenv("WC_CONSUMER_KEY", "ck_env")
    monkeypatch.setenv("WC_CONSUMER_SECRET", "cs_env")

    resolved = resolve_woocommerce_credentials(consumer_key="ck_param")
    assert resolved.site_url == "https://env.example.com"
    assert resolved.consumer_key == "ck_param"


def test_missing_credentials():
    with pytest.raises(MissingCredentialsError):
        WooCommerceCredentialConfig.from_env()


def test_app_config_tolerates_missing_credentials(monkeypatch):
    monkeypatch.setenv("REPORTS_TOP_LIMIT", "25")
    monkeypatch.setenv("REPORTS_REQUEST_TIMEOUT", "12.5")

    config = AppConfig.from_env()
    assert config.woocommerce is None
    assert config.reports.top_products_limit == 25
    assert config.reports.request_timeout == 12.5
    assert config.reports.default_range == "last_7_days"


def test_reports_defaults_have_no_timeout():
    assert ReportsConfig().request_timeout is None


def test_upstream_error_codes():
    assert UpstreamError("revenue stats", 404, "Not Found").code == "NOT_FOUND"
    error = UpstreamError("revenue stats", 500, None)
    assert error.code == "UPSTREAM_ERROR"
    assert str(error) == "Failed to fetch revenue stats: "
