"""Signed cart-import URLs for the headless WordPress endpoint.

The WordPress side decodes ``payload``, recomputes the HMAC-SHA256 of the encoded
string with the shared secret and compares it against ``sig`` before rebuilding
the cart. Both values are unpadded base64url.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from typing import Any
from urllib.parse import quote

from services.api.app.models.checkout import CartItem
from services.api.app.services.woo_base import Resolution, Resolved

CART_IMPORT_PATH = "/wp-json/headless/v1/cart-import"


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def cart_entries(resolutions: list[Resolution]) -> list[dict[str, Any]]:
    """Resolved items carry their product ID, unresolved ones keep the original ID."""

    return [
        {
            "id": r.product_id if isinstance(r, Resolved) else r.original_id,
            "qty": r.quantity,
        }
        for r in resolutions
    ]


def unresolved_entries(items: list[CartItem]) -> list[dict[str, Any]]:
    return [{"id": item.id, "qty": item.quantity} for item in items]


def encode_cart_payload(entries: list[dict[str, Any]]) -> str:
    raw = json.dumps(entries, separators=(",", ":"), ensure_ascii=False)
    return b64url(raw.encode("utf-8"))


def decode_cart_payload(payload: str) -> list[dict[str, Any]]:
    return json.loads(b64url_decode(payload).decode("utf-8"))


def sign_payload(payload: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).digest()
    return b64url(digest)


def verify_cart_import_signature(payload: str, sig: str, secret: str) -> bool:
    return hmac.compare_digest(sign_payload(payload, secret), sig)


def build_cart_import_url(site_url: str, secret: str, entries: list[dict[str, Any]]) -> str:
    payload = encode_cart_payload(entries)
    sig = sign_payload(payload, secret)
    return (
        f"{site_url}{CART_IMPORT_PATH}"
        f"?payload={quote(payload, safe='')}&sig={quote(sig, safe='')}"
    )
