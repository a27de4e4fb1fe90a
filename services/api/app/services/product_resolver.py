from __future__ import annotations

import logging

import httpx

from services.api.app.models.checkout import CartItem
from services.api.app.services.woo_base import Resolution, Resolved, Unresolved, WooConfig

logger = logging.getLogger(__name__)


def products_endpoint(cfg: WooConfig) -> str:
    return f"{cfg.site_url}/wp-json/wc/v3/products"


def resolve_item(client: httpx.Client, cfg: WooConfig, item: CartItem) -> Resolution:
    """Map a cart item to a numeric product ID.

    Numeric IDs are taken as-is. Slugs cost one product lookup. Any lookup failure
    turns into ``Unresolved``; nothing is raised for a single item.
    """

    if isinstance(item.id, int):
        if item.id > 0:
            return Resolved(product_id=item.id, quantity=item.quantity, original_id=item.id)
        return Unresolved(original_id=item.id, quantity=item.quantity)

    # An empty slug filter makes WooCommerce return its whole catalog.
    if not item.id.strip():
        return Unresolved(original_id=item.id, quantity=item.quantity)

    product_id = _lookup_slug(client, cfg, item.id)
    if product_id is None:
        return Unresolved(original_id=item.id, quantity=item.quantity)
    return Resolved(product_id=product_id, quantity=item.quantity, original_id=item.id)


def resolve_cart_items(
    client: httpx.Client, cfg: WooConfig, items: list[CartItem]
) -> list[Resolution]:
    return [resolve_item(client, cfg, item) for item in items]


def _lookup_slug(client: httpx.Client, cfg: WooConfig, slug: str) -> int | None:
    url = products_endpoint(cfg)
    try:
        resp = client.get(
            url,
            params={"slug": slug},
            auth=(cfg.consumer_key, cfg.consumer_secret),
        )
    except httpx.HTTPError as e:
        logger.warning("Product lookup for slug %r failed: %s: %s", slug, type(e).__name__, e)
        return None

    if not resp.is_success:
        logger.warning("Product lookup for slug %r returned %s", slug, resp.status_code)
        return None

    try:
        data = resp.json()
    except ValueError:
        logger.warning("Product lookup for slug %r returned a non-JSON body", slug)
        return None

    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        logger.warning("No product found for slug %r", slug)
        return None

    try:
        product_id = int(data[0].get("id") or 0)
    except (TypeError, ValueError):
        product_id = 0

    if product_id <= 0:
        logger.warning("Product record for slug %r has no usable id", slug)
        return None
    return product_id
