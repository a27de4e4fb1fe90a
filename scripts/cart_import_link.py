from __future__ import annotations

import argparse
import json
import sys

from pydantic import TypeAdapter, ValidationError

from services.api.app.core.logging import setup_logging
from services.api.app.models.checkout import CartItem
from services.api.app.services.woo_base import WooCheckoutError
from services.api.app.services.woo_gateway import WooCheckoutGateway


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Print a signed WooCommerce cart-import URL for a cart"
    )
    parser.add_argument(
        "--items",
        required=True,
        help='Cart items as JSON, e.g. \'[{"id": "tee", "qty": 2}]\'',
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        items = TypeAdapter(list[CartItem]).validate_python(json.loads(args.items))
    except (ValueError, ValidationError) as e:
        print(f"Invalid --items: {e}", file=sys.stderr)
        return 2

    try:
        url = WooCheckoutGateway.from_env().build_cart_import_url(items)
    except WooCheckoutError as e:
        print(str(e), file=sys.stderr)
        return 2

    print(url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
