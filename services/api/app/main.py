"""Woo checkout gateway service entrypoint."""

from fastapi import FastAPI

from services.api.app.core.logging import setup_logging
from services.api.app.routers.checkout import router as checkout_router

app = FastAPI(title="Woo Checkout Gateway")

app.include_router(checkout_router)


@app.on_event("startup")
def _startup() -> None:
    setup_logging()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
