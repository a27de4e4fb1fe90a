from __future__ import annotations

from pydantic import BaseModel


class CartItem(BaseModel):
    # Numeric WooCommerce product ID or a product slug.
    id: int | str
    qty: int | None = None

    @property
    def quantity(self) -> int:
        return self.qty or 1


class CustomerInfo(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class CheckoutRequest(BaseModel):
    items: list[CartItem]
    customer: CustomerInfo | None = None


class CartImportRequest(BaseModel):
    items: list[CartItem]


class CheckoutResponse(BaseModel):
    url: str
