from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from services.api.app.models.checkout import CustomerInfo
from services.api.app.services.woo_base import (
    Resolution,
    Resolved,
    WooAuthFallbackError,
    WooConfig,
    WooMalformedResponseError,
    WooOrderCreateError,
    WooTransportError,
)

logger = logging.getLogger(__name__)


def orders_endpoint(cfg: WooConfig) -> str:
    return f"{cfg.site_url}/wp-json/wc/v3/orders"


def build_billing(customer: CustomerInfo | None) -> dict[str, str] | None:
    if customer is None:
        return None

    billing: dict[str, str] | None = None
    if customer.email:
        billing = {"email": customer.email}
    if customer.first_name or customer.last_name:
        names = {
            key: value
            for key, value in (
                ("first_name", customer.first_name),
                ("last_name", customer.last_name),
            )
            if value is not None
        }
        billing = {**(billing or {}), **names}
    return billing


def build_order_payload(
    resolutions: list[Resolution], customer: CustomerInfo | None = None
) -> dict[str, Any]:
    """Build a pending-order body. Unresolved items are dropped."""

    payload: dict[str, Any] = {
        "payment_method": "",
        "payment_method_title": "",
        "set_paid": False,
        "line_items": [
            {"product_id": r.product_id, "quantity": r.quantity}
            for r in resolutions
            if isinstance(r, Resolved)
        ],
    }

    billing = build_billing(customer)
    if billing is not None:
        payload["billing"] = billing
    return payload


def build_pay_url(site_url: str, order_id: int | str, order_key: str) -> str:
    return (
        f"{site_url}/checkout/order-pay/{order_id}/"
        f"?pay_for_order=true&key={quote(str(order_key), safe='')}"
    )


def create_pending_order(client: httpx.Client, cfg: WooConfig, payload: dict[str, Any]) -> str:
    """POST the order and return its pay-for-order URL.

    Some hosts strip the Authorization header before it reaches WordPress. On a 401
    the same POST is sent once more with the credentials as query params. No other
    status and no transport error is retried: the first POST may already have
    created an order upstream.
    """

    url = orders_endpoint(cfg)
    resp = _post(client, url, json=payload, auth=(cfg.consumer_key, cfg.consumer_secret))

    if resp.is_success:
        return _pay_url_from_response(cfg, resp, fallback=False)

    if resp.status_code != 401:
        raise WooOrderCreateError(resp.status_code, resp.text)

    logger.warning("Woo order create got 401 with Basic auth; retrying with query credentials")
    resp = _post(
        client,
        url,
        json=payload,
        params={"consumer_key": cfg.consumer_key, "consumer_secret": cfg.consumer_secret},
    )
    if not resp.is_success:
        raise WooAuthFallbackError(resp.status_code, resp.text)

    return _pay_url_from_response(cfg, resp, fallback=True)


def _post(client: httpx.Client, url: str, **kwargs: Any) -> httpx.Response:
    try:
        return client.post(url, **kwargs)
    except httpx.HTTPError as e:
        raise WooTransportError(url, e) from e


def _pay_url_from_response(cfg: WooConfig, resp: httpx.Response, *, fallback: bool) -> str:
    try:
        data = resp.json()
    except ValueError as e:
        raise WooMalformedResponseError(fallback=fallback) from e

    if not isinstance(data, dict):
        raise WooMalformedResponseError(fallback=fallback)

    order_id = data.get("id")
    order_key = data.get("order_key")
    if not order_id or not order_key:
        raise WooMalformedResponseError(fallback=fallback)

    logger.info("Created pending Woo order %s", order_id)
    return build_pay_url(cfg.site_url, order_id, order_key)
