from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Protocol

import httpx

from services.api.app.models.checkout import CartItem, CustomerInfo

AUTH_HINT = "Check REST keys (Read/Write), HTTPS, and server passing Authorization header."


class WooCheckoutError(Exception):
    """Base class for WooCommerce checkout errors."""


class WooConfigurationError(WooCheckoutError):
    def __init__(self, missing: list[str], message: str | None = None) -> None:
        super().__init__(message or f"WooCommerce env vars missing: {', '.join(missing)}")
        # Names of the env vars that are missing or invalid.
        self.missing = missing


def invalid_config(name: str, value: str, reason: str) -> WooConfigurationError:
    return WooConfigurationError([name], f"Invalid {name}={value!r}: {reason}")


class WooOrderCreateError(WooCheckoutError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Woo order create failed: {status_code} {body}")
        self.status_code = status_code
        self.body = body


class WooAuthFallbackError(WooCheckoutError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(
            f"Woo order create failed (fallback): {status_code} {body}. {AUTH_HINT}"
        )
        self.status_code = status_code
        self.body = body


class WooMalformedResponseError(WooCheckoutError):
    def __init__(self, fallback: bool = False) -> None:
        suffix = " (fallback)" if fallback else ""
        super().__init__(f"Woo order response missing id/order_key{suffix}")
        self.fallback = fallback


class WooTransportError(WooCheckoutError):
    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"Woo request to {url} failed: {type(cause).__name__}: {cause}")
        self.url = url


@dataclass(frozen=True, slots=True)
class WooConfig:
    site_url: str
    consumer_key: str
    consumer_secret: str
    shared_secret: str
    allow_insecure_tls: bool = False
    timeout_seconds: float = 20.0

    @classmethod
    def from_env(cls) -> "WooConfig":
        """Read WooCommerce settings from env vars.

        Only the timeout is checked here. Each checkout flow requires a different
        subset of the rest, so those are validated in ``require`` right before the
        flow starts.
        """

        return cls(
            site_url=_env("WOOCOMMERCE_SITE_URL").rstrip("/"),
            consumer_key=_env("WOOCOMMERCE_CONSUMER_KEY"),
            consumer_secret=_env("WOOCOMMERCE_CONSUMER_SECRET"),
            shared_secret=_env("WOO_SHARED_SECRET"),
            allow_insecure_tls=_parse_bool(os.getenv("WOO_ALLOW_INSECURE_TLS", "false")),
            timeout_seconds=_parse_timeout(os.getenv("WOO_REQUEST_TIMEOUT_SECONDS", "20")),
        )

    @property
    def has_rest_credentials(self) -> bool:
        return bool(self.consumer_key and self.consumer_secret)

    def require(self, *names: str) -> None:
        values = {
            "WOOCOMMERCE_SITE_URL": self.site_url,
            "WOOCOMMERCE_CONSUMER_KEY": self.consumer_key,
            "WOOCOMMERCE_CONSUMER_SECRET": self.consumer_secret,
            "WOO_SHARED_SECRET": self.shared_secret,
        }
        missing = [name for name in names if not values[name]]
        if missing:
            raise WooConfigurationError(missing)
        if "WOOCOMMERCE_SITE_URL" in names:
            _check_site_url(self.site_url)


@dataclass(frozen=True, slots=True)
class Resolved:
    product_id: int
    quantity: int
    original_id: int | str


@dataclass(frozen=True, slots=True)
class Unresolved:
    original_id: int | str
    quantity: int


Resolution = Resolved | Unresolved


class CheckoutGateway(Protocol):
    def create_checkout(
        self, items: list[CartItem], customer: CustomerInfo | None = None
    ) -> str: ...

    def build_cart_import_url(self, items: list[CartItem]) -> str: ...


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y"}


def _parse_timeout(value: str) -> float:
    name = "WOO_REQUEST_TIMEOUT_SECONDS"
    try:
        timeout = float(value)
    except ValueError as e:
        raise invalid_config(name, value, "expected a number of seconds") from e
    if not timeout > 0:
        raise invalid_config(name, value, "must be greater than 0")
    return timeout


def _check_site_url(site_url: str) -> None:
    name = "WOOCOMMERCE_SITE_URL"
    try:
        url = httpx.URL(site_url)
    except httpx.InvalidURL as e:
        raise invalid_config(name, site_url, str(e)) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise invalid_config(name, site_url, "expected an http(s) URL with a host")
