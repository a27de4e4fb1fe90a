from __future__ import annotations

from services.api.app.services.woo_base import CheckoutGateway
from services.api.app.services.woo_gateway import WooCheckoutGateway


def get_checkout_gateway() -> CheckoutGateway:
    """Build the checkout gateway from env vars.

    Config is read per call so env changes (and tests) take effect without a restart.
    """

    return WooCheckoutGateway.from_env()
