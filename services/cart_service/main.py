"""
cart_service/main.py - Shopping Cart Microservice

PURPOSE:
    Manages per-user shopping carts with time-bounded validity.
    Cart state lives in process memory; a cart left untouched past its TTL is
    silently replaced by a new empty cart on the next access.

RESPONSIBILITIES:
    - Add, update and remove cart lines for authenticated users
    - Validate items against the static catalog and freeze unit prices
    - Recompute cart totals and renew expiry on every change
    - Expose the catalog

API ENDPOINTS:
    GET    /health                    - Health check endpoint
    GET    /api/items                 - List catalog items (public)
    GET    /api/cart                  - View current cart
    POST   /api/cart/items            - Add item to cart
    PUT    /api/cart/items/{item_id}  - Set item quantity
    DELETE /api/cart/items/{item_id}  - Remove item from cart

AUTHENTICATION:
    Authorization: Bearer <JWT with a "userId" claim>
    Verified with JWT_SECRET when set, decoded without verification otherwise.
    Generate a token with: python generate_token.py user123

TESTING COMMANDS:
    1. Health Check:
        curl -X GET http://localhost:8001/health

    2. List Items:
        curl -X GET http://localhost:8001/api/items

    3. Add Item to Cart:
        curl -X POST http://localhost:8001/api/cart/items \
          -H "Authorization: Bearer $TOKEN" \
          -H "Content-Type: application/json" \
          -d '{"item_id": "item-001", "quantity": 2}'

    4. Set Item Quantity:
        curl -X PUT http://localhost:8001/api/cart/items/item-001 \
          -H "Authorization: Bearer $TOKEN" \
          -H "Content-Type: application/json" \
          -d '{"quantity": 1}'

    5. Remove Item:
        curl -X DELETE http://localhost:8001/api/cart/items/item-001 \
          -H "Authorization: Bearer $TOKEN"

    6. View Cart:
        curl -X GET http://localhost:8001/api/cart -H "Authorization: Bearer $TOKEN"
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from pydantic import Field
from pydantic_settings import BaseSettings

from services.cart_service import __version__
from services.cart_service.cart_service import (
    DEFAULT_CART_TTL_SECONDS,
    DEFAULT_MAX_ITEMS_PER_CART,
    CartService,
)
from services.cart_service.cart_store import CartStore
from services.cart_service.catalog import DEFAULT_ITEMS_PATH, Catalog
from services.cart_service.routes import router
from services.cart_service.schemas import HealthResponse
from shared.logging_config import setup_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "cart-service"


class Settings(BaseSettings):
    """Application settings, read from the environment."""

    cart_ttl_seconds: int = Field(default=DEFAULT_CART_TTL_SECONDS, gt=0)
    max_items_per_cart: int = Field(default=DEFAULT_MAX_ITEMS_PER_CART, ge=1)
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    items_path: Path = DEFAULT_ITEMS_PATH
    log_level: str = "INFO"
    log_timezone: str = "UTC"
    cart_service_port: int = 8001


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CartStore] = None,
    catalog: Optional[Catalog] = None,
) -> FastAPI:
    """Build the FastAPI app with its own store, catalog and cart service."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Cart Service...")
        logger.info(
            f"Cart TTL {settings.cart_ttl_seconds}s, "
            f"max {settings.max_items_per_cart} items per cart, "
            f"{len(app.state.cart_service.catalog)} catalog items"
        )
        if not settings.jwt_secret:
            logger.warning("JWT_SECRET not set, tokens are decoded without signature verification")

        yield

        logger.info("Shutting down Cart Service...")

    app = FastAPI(title="Cart Service", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.cart_service = CartService(
        store=store if store is not None else CartStore(),
        catalog=catalog if catalog is not None else Catalog.from_file(settings.items_path),
        ttl_seconds=settings.cart_ttl_seconds,
        max_items_per_cart=settings.max_items_per_cart,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", service=SERVICE_NAME, version=__version__)

    app.include_router(router)
    return app


def main() -> None:
    import uvicorn

    settings = Settings()
    setup_logging(SERVICE_NAME, level=settings.log_level, tz=settings.log_timezone)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.cart_service_port)


if __name__ == "__main__":
    main()
