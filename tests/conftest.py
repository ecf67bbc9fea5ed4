"""
Shared fixtures: a fake WooCommerce site served through httpx.MockTransport.
"""
from typing import Any, Optional

import httpx
import pytest

from commerce_reports.config import AppConfig, ReportsConfig, WooCommerceCredentialConfig

SITE_URL = "https://shop.example.com"
ANALYTICS = "/wp-json/wc-analytics"
V3 = "/wp-json/wc/v3"


class FakeWooCommerce:
    """Routes requests by path and records every request it receives."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Optional[Exception] = None

    def route(self, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[path] = (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status, payload = self.routes.get(request.url.path, (404, {"code": "rest_no_route"}))
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def fake_store() -> FakeWooCommerce:
    return FakeWooCommerce()


@pytest.fixture
def credentials() -> WooCommerceCredentialConfig:
    return WooCommerceCredentialConfig(
        site_url=SITE_URL + "/",
        consumer_key="ck_test",
        consumer_secret="cs_test",
    )


@pytest.fixture
def app_config(credentials: WooCommerceCredentialConfig) -> AppConfig:
    return AppConfig(woocommerce=credentials, reports=ReportsConfig())


@pytest.fixture(autouse=True)
def _clear_woocommerce_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("WP_SITE_URL", "WC_CONSUMER_KEY", "WC_CONSUMER_SECRET"):
        monkeypatch.delenv(name, raising=False)
