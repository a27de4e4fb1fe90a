from __future__ import annotations

import logging

import httpx

from services.api.app.models.checkout import CartItem, CustomerInfo
from services.api.app.services.cart_import import (
    build_cart_import_url,
    cart_entries,
    unresolved_entries,
)
from services.api.app.services.product_resolver import resolve_cart_items
from services.api.app.services.woo_base import WooConfig
from services.api.app.services.woo_orders import build_order_payload, create_pending_order

logger = logging.getLogger(__name__)


class WooCheckoutGateway:
    """Checkout against a WooCommerce store.

    Two independent flows:
    - create_checkout: creates a pending order over the REST API and returns its
      pay-for-order URL.
    - build_cart_import_url: returns a signed redirect URL for the headless
      cart-import endpoint; no order is created here.

    Env vars: see WooConfig.from_env.
    """

    def __init__(self, cfg: WooConfig, *, transport: httpx.BaseTransport | None = None) -> None:
        self._cfg = cfg
        self._transport = transport

    @classmethod
    def from_env(cls) -> "WooCheckoutGateway":
        return cls(WooConfig.from_env())

    @property
    def config(self) -> WooConfig:
        return self._cfg

    def create_checkout(self, items: list[CartItem], customer: CustomerInfo | None = None) -> str:
        self._cfg.require(
            "WOOCOMMERCE_SITE_URL",
            "WOOCOMMERCE_CONSUMER_KEY",
            "WOOCOMMERCE_CONSUMER_SECRET",
        )

        with self._client() as client:
            resolutions = resolve_cart_items(client, self._cfg, items)
            payload = build_order_payload(resolutions, customer)
            if len(payload["line_items"]) < len(items):
                logger.info(
                    "Dropped %d unresolved cart item(s) from order",
                    len(items) - len(payload["line_items"]),
                )
            return create_pending_order(client, self._cfg, payload)

    def build_cart_import_url(self, items: list[CartItem]) -> str:
        self._cfg.require("WOOCOMMERCE_SITE_URL", "WOO_SHARED_SECRET")

        if self._cfg.has_rest_credentials:
            with self._client() as client:
                entries = cart_entries(resolve_cart_items(client, self._cfg, items))
        else:
            # Without REST keys the WordPress side resolves slugs itself.
            entries = unresolved_entries(items)

        return build_cart_import_url(self._cfg.site_url, self._cfg.shared_secret, entries)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._cfg.timeout_seconds,
            verify=not self._cfg.allow_insecure_tls,
            transport=self._transport,
        )
