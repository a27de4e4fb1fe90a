from __future__ import annotations

import json
import logging
from collections.abc import Callable

import httpx
import pytest
from services.api.app.services.woo_base import WooConfig
from services.api.app.services.woo_gateway import WooCheckoutGateway

SITE = "https://shop.example"


class FakeWoo:
    """In-process stand-in for the WooCommerce REST API.

    Product lookups are answered from ``products`` (slug -> id). Order POSTs pop
    the next queued response from ``order_responses``.
    """

    def __init__(self) -> None:
        self.products: dict[str, int] = {}
        self.order_responses: list[httpx.Response | Exception] = []
        self.lookup_status = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET" and request.url.path == "/wp-json/wc/v3/products":
            if self.lookup_status != 200:
                return httpx.Response(self.lookup_status, json={"code": "error"})
            slug = request.url.params.get("slug", "")
            if slug in self.products:
                return httpx.Response(200, json=[{"id": self.products[slug], "slug": slug}])
            return httpx.Response(200, json=[])

        if request.method == "POST" and request.url.path == "/wp-json/wc/v3/orders":
            outcome = self.order_responses.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        return httpx.Response(404, json={"code": "rest_no_route"})

    @property
    def lookups(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def order_posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def order_body(self, index: int = 0) -> dict:
        return json.loads(self.order_posts[index].content)

    def gateway(self, **overrides: object) -> WooCheckoutGateway:
        cfg = make_config(**overrides)
        return WooCheckoutGateway(cfg, transport=httpx.MockTransport(self.handler))


def make_config(**overrides: object) -> WooConfig:
    values: dict[str, object] = {
        "site_url": SITE,
        "consumer_key": "ck_test",
        "consumer_secret": "cs_test",
        "shared_secret": "s3cret",
    }
    values.update(overrides)
    return WooConfig(**values)  # type: ignore[arg-type]


@pytest.fixture()
def fake_woo() -> FakeWoo:
    return FakeWoo()


@pytest.fixture()
def woo_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    names = (
        "WOOCOMMERCE_SITE_URL",
        "WOOCOMMERCE_CONSUMER_KEY",
        "WOOCOMMERCE_CONSUMER_SECRET",
        "WOO_SHARED_SECRET",
        "WOO_ALLOW_INSECURE_TLS",
        "WOO_REQUEST_TIMEOUT_SECONDS",
    )
    for name in names:
        monkeypatch.delenv(name, raising=False)

    def _set(**values: str) -> None:
        for name, value in values.items():
            monkeypatch.setenv(name, value)

    return _set


@pytest.fixture()
def restore_logging():
    """Undo setup_logging changes to the root and uvicorn loggers."""

    names = ("", "uvicorn", "uvicorn.error", "uvicorn.access")
    saved = {
        name: (list(logging.getLogger(name).handlers), logging.getLogger(name).level)
        for name in names
    }
    yield
    for name, (handlers, level) in saved.items():
        lg = logging.getLogger(name)
        lg.handlers = handlers
        lg.setLevel(level)
