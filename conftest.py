# Shared pytest fixtures for the cart service tests.
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from services.cart_service.auth import generate_token
from services.cart_service.cart_service import CartService
from services.cart_service.cart_store import CartStore
from services.cart_service.catalog import Catalog
from services.cart_service.main import Settings, create_app
from services.cart_service.models import Item

TTL_SECONDS = 1800
MAX_ITEMS = 3


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def catalog_items():
    return [
        Item(item_id="item-001", name="Wireless Headphones", price=10.0, description="Noise-cancelling"),
        Item(item_id="item-002", name="USB-C Cable", price=2.5),
        Item(item_id="item-003", name="Phone Case", price=7.25),
        Item(item_id="item-004", name="Power Bank", price=20.0),
        Item(item_id="item-005", name="Laptop Stand", price=0.0),
    ]


@pytest.fixture
def catalog(catalog_items) -> Catalog:
    return Catalog(catalog_items)


@pytest.fixture
def store(clock) -> CartStore:
    return CartStore(clock=clock)


@pytest.fixture
def service(store, catalog, clock) -> CartService:
    return CartService(
        store=store,
        catalog=catalog,
        ttl_seconds=TTL_SECONDS,
        max_items_per_cart=MAX_ITEMS,
        clock=clock,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="unit-test-secret", cart_ttl_seconds=TTL_SECONDS, max_items_per_cart=MAX_ITEMS)


@pytest.fixture
def app(settings, catalog):
    return create_app(settings, store=CartStore(), catalog=catalog)


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(settings):
    def _headers(user_id: str = "test-user-1") -> dict:
        token = generate_token(user_id, settings.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return _headers
