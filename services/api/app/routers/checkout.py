from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Form, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import TypeAdapter, ValidationError

from services.api.app.models.checkout import (
    CartImportRequest,
    CartItem,
    CheckoutRequest,
    CheckoutResponse,
)
from services.api.app.services.checkout_factory import get_checkout_gateway
from services.api.app.services.woo_base import (
    CheckoutGateway,
    WooCheckoutError,
    WooConfigurationError,
    WooTransportError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_cart_items = TypeAdapter(list[CartItem])


def _raise_gateway_http_error(e: Exception) -> None:
    if isinstance(e, WooConfigurationError):
        raise HTTPException(status_code=503, detail=str(e)) from e

    if isinstance(e, WooTransportError):
        raise HTTPException(status_code=504, detail=str(e)) from e

    if isinstance(e, WooCheckoutError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _gateway() -> CheckoutGateway:
    try:
        return get_checkout_gateway()
    except WooCheckoutError as e:
        _raise_gateway_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def _parse_items(raw: str) -> list[CartItem]:
    return _cart_items.validate_python(json.loads(raw or "[]"))


@router.post("/v1/checkout", response_model=CheckoutResponse)
def create_checkout(payload: CheckoutRequest) -> CheckoutResponse:
    gateway = _gateway()
    try:
        url = gateway.create_checkout(payload.items, payload.customer)
    except Exception as e:
        _raise_gateway_http_error(e)
    return CheckoutResponse(url=url)


@router.post("/v1/checkout/cart-import", response_model=CheckoutResponse)
def create_cart_import(payload: CartImportRequest) -> CheckoutResponse:
    gateway = _gateway()
    try:
        url = gateway.build_cart_import_url(payload.items)
    except Exception as e:
        _raise_gateway_http_error(e)
    return CheckoutResponse(url=url)


@router.post("/v1/checkout/form")
def checkout_from_form(items: str = Form("[]")) -> RedirectResponse:
    try:
        cart = _parse_items(items)
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid items field: {e}") from e

    gateway = _gateway()
    try:
        url = gateway.create_checkout(cart)
    except Exception as e:
        _raise_gateway_http_error(e)
    return RedirectResponse(url, status_code=303)


@router.post("/v1/checkout/cart-import/form")
def cart_import_from_form(items: str = Form("[]")) -> RedirectResponse:
    try:
        cart = _parse_items(items)
    except (ValueError, ValidationError) as e:
        logger.warning("Ignoring unparsable items field in cart-import form: %s", e)
        cart = []

    gateway = _gateway()
    try:
        url = gateway.build_cart_import_url(cart)
    except Exception as e:
        _raise_gateway_http_error(e)
    return RedirectResponse(url, status_code=303)
