from __future__ import annotations

import base64

import httpx
import pytest
from services.api.app.models.checkout import CartItem
from services.api.app.services.product_resolver import resolve_cart_items, resolve_item
from services.api.app.services.woo_base import Resolved, Unresolved


@pytest.fixture()
def client(fake_woo) -> httpx.Client:
    with httpx.Client(transport=httpx.MockTransport(fake_woo.handler)) as c:
        yield c


def test_numeric_ids_make_no_lookups(fake_woo, client: httpx.Client) -> None:
    cfg = fake_woo.gateway().config
    items = [CartItem(id=5, qty=2), CartItem(id=9)]

    resolved = resolve_cart_items(client, cfg, items)

    assert resolved == [
        Resolved(product_id=5, quantity=2, original_id=5),
        Resolved(product_id=9, quantity=1, original_id=9),
    ]
    assert fake_woo.requests == []


def test_slug_is_looked_up_with_basic_auth(fake_woo, client: httpx.Client) -> None:
    fake_woo.products["tee"] = 10
    cfg = fake_woo.gateway().config

    result = resolve_item(client, cfg, CartItem(id="tee", qty=3))

    assert result == Resolved(product_id=10, quantity=3, original_id="tee")
    (lookup,) = fake_woo.lookups
    assert lookup.url.params["slug"] == "tee"
    expected = base64.b64encode(b"ck_test:cs_test").decode()
    assert lookup.headers["Authorization"] == f"Basic {expected}"


def test_unknown_slug_is_unresolved(fake_woo, client: httpx.Client) -> None:
    cfg = fake_woo.gateway().config

    result = resolve_item(client, cfg, CartItem(id="ghost", qty=1))

    assert result == Unresolved(original_id="ghost", quantity=1)


def test_lookup_error_status_is_unresolved(fake_woo, client: httpx.Client) -> None:
    fake_woo.products["tee"] = 10
    fake_woo.lookup_status = 500
    cfg = fake_woo.gateway().config

    assert isinstance(resolve_item(client, cfg, CartItem(id="tee")), Unresolved)


def test_transport_error_is_unresolved(fake_woo) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    cfg = fake_woo.gateway().config
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        result = resolve_item(client, cfg, CartItem(id="tee", qty=2))

    assert result == Unresolved(original_id="tee", quantity=2)


def test_record_without_id_is_unresolved(fake_woo) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"slug": "tee"}])

    cfg = fake_woo.gateway().config
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        assert isinstance(resolve_item(client, cfg, CartItem(id="tee")), Unresolved)


def test_non_positive_numeric_id_is_unresolved_without_lookup(
    fake_woo, client: httpx.Client
) -> None:
    cfg = fake_woo.gateway().config

    assert resolve_item(client, cfg, CartItem(id=0, qty=1)) == Unresolved(
        original_id=0, quantity=1
    )
    assert fake_woo.requests == []


def test_resolution_keeps_cart_order(fake_woo, client: httpx.Client) -> None:
    fake_woo.products.update({"tee": 10, "mug": 11})
    cfg = fake_woo.gateway().config
    items = [CartItem(id="mug"), CartItem(id=3), CartItem(id="nope"), CartItem(id="tee")]

    resolved = resolve_cart_items(client, cfg, items)

    assert [type(r).__name__ for r in resolved] == [
        "Resolved",
        "Resolved",
        "Unresolved",
        "Resolved",
    ]
    assert [r.original_id for r in resolved] == ["mug", 3, "nope", "tee"]
    assert len(fake_woo.lookups) == 3


@pytest.mark.parametrize("slug", ["", "   "])
def test_blank_slug_is_unresolved_without_lookup(
    fake_woo, client: httpx.Client, slug: str
) -> None:
    cfg = fake_woo.gateway().config

    assert resolve_item(client, cfg, CartItem(id=slug, qty=1)) == Unresolved(
        original_id=slug, quantity=1
    )
    assert fake_woo.requests == []
