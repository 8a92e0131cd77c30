"""
cart_service.py - Cart Lifecycle Engine

PURPOSE:
    All business rules around carts: get-or-create with silent expiry, item
    add/update/remove, total recomputation and TTL renewal. The service is the
    only writer of the CartStore.

RULES:
    - An expired cart (now > expires_at) is superseded by a new empty cart with a
      new cart ID on next access. Nothing is deleted and nobody is notified.
    - A line's unit price is frozen when the line is first added.
    - total == sum(quantity * price) over the lines, recomputed on every mutation.
    - Each successful mutation renews updated_at and expires_at (now + TTL).
    - Failures are returned as CartResult.error alongside the unchanged cart.

CONCURRENCY:
    FastAPI runs sync endpoints on a thread pool, so each read-modify-write runs
    under a per-user lock. The store itself is last-write-wins.
"""

import logging
import random
import string
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from services.cart_service.cart_store import CartStore, Clock, to_epoch_ms, utc_now
from services.cart_service.catalog import Catalog
from services.cart_service.models import (
    Cart,
    CartError,
    CartErrorKind,
    CartItem,
    CartResult,
)

logger = logging.getLogger(__name__)

DEFAULT_CART_TTL_SECONDS = 30 * 60
DEFAULT_MAX_ITEMS_PER_CART = 50

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_cart_id(now: datetime) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"cart-{to_epoch_ms(now)}-{suffix}"


def calculate_total(items: List[CartItem]) -> float:
    return sum((line.price * line.quantity for line in items), 0.0)


def _context(user_id: str, cart: Cart) -> Dict[str, str]:
    """Log record extras picked up by the JSON formatter."""
    return {"user_id": user_id, "cart_id": cart.cart_id}


def normalize_quantity(quantity: Any) -> Optional[int]:
    """Return quantity as a positive int, or None if it is not one."""
    if isinstance(quantity, bool):
        return None
    if isinstance(quantity, float):
        if not quantity.is_integer():
            return None
        quantity = int(quantity)
    if not isinstance(quantity, int) or quantity <= 0:
        return None
    return quantity


class CartService:
    """Cart operations for authenticated users."""

    def __init__(
        self,
        store: CartStore,
        catalog: Catalog,
        ttl_seconds: int = DEFAULT_CART_TTL_SECONDS,
        max_items_per_cart: int = DEFAULT_MAX_ITEMS_PER_CART,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_items_per_cart = max_items_per_cart
        self._clock = clock or utc_now
        # One lock per user ever seen, never pruned; grows alongside the store's user histories.
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    # =====================================================
    # LIFECYCLE
    # =====================================================
    def _new_cart(self) -> Cart:
        now = self._clock()
        return Cart(
            cart_id=generate_cart_id(now),
            items=[],
            total=0.0,
            created_at=now,
            updated_at=now,
            expires_at=now + self.ttl,
        )

    def _is_expired(self, cart: Cart) -> bool:
        return self._clock() > cart.expires_at

    def _renew(self, cart: Cart) -> None:
        now = self._clock()
        cart.total = calculate_total(cart.items)
        cart.updated_at = now
        cart.expires_at = now + self.ttl

    def _save(self, user_id: str, cart: Cart) -> Cart:
        self.store.save(user_id, cart)
        return self.store.get_current(user_id).cart.model_copy(deep=True)

    def _get_or_create(self, user_id: str) -> Cart:
        record = self.store.get_current(user_id)

        if record is None:
            cart = self._save(user_id, self._new_cart())
            logger.info(f"Created cart {cart.cart_id} for user {user_id}", extra=_context(user_id, cart))
            return cart

        if self._is_expired(record.cart):
            cart = self._save(user_id, self._new_cart())
            logger.info(
                f"Cart {record.cart.cart_id} for user {user_id} expired, "
                f"replaced by {cart.cart_id}",
                extra=_context(user_id, cart),
            )
            return cart

        return record.cart.model_copy(deep=True)

    def get_or_create(self, user_id: str) -> Cart:
        """Return the user's live cart, creating a fresh one if none exists or it expired."""
        with self._user_lock(user_id):
            return self._get_or_create(user_id)

    def get_cart(self, user_id: str) -> Cart:
        """Read path. May still write when the previous cart has expired."""
        return self.get_or_create(user_id)

    # =====================================================
    # MUTATIONS
    # =====================================================
    def _fail(self, cart: Cart, kind: CartErrorKind, message: str, user_id: str) -> CartResult:
        logger.warning(f"{kind.value} for user {user_id}: {message}", extra=_context(user_id, cart))
        return CartResult(cart=cart, error=CartError(kind=kind, message=message))

    def _commit(self, user_id: str, cart: Cart) -> CartResult:
        self._renew(cart)
        return CartResult(cart=self._save(user_id, cart))

    def add_item(self, user_id: str, item_id: str, quantity: Any) -> CartResult:
        """
        Add `quantity` units of a catalog item.

        An existing line is incremented and keeps its original unit price; a new
        line snapshots the catalog's current price. A new line is refused once the
        cart holds max_items_per_cart distinct lines.
        """
        with self._user_lock(user_id):
            item_error = self.catalog.validate_item(item_id)
            if item_error:
                return self._fail(
                    self._get_or_create(user_id), CartErrorKind.ITEM_NOT_FOUND, item_error, user_id
                )

            amount = normalize_quantity(quantity)
            if amount is None:
                return self._fail(
                    self._get_or_create(user_id),
                    CartErrorKind.INVALID_QUANTITY,
                    "Quantity must be a positive integer",
                    user_id,
                )

            cart = self._get_or_create(user_id)
            line = cart.find_item(item_id)

            if line is None and len(cart.items) >= self.max_items_per_cart:
                return self._fail(
                    cart,
                    CartErrorKind.CART_FULL,
                    f"Maximum {self.max_items_per_cart} items per cart allowed",
                    user_id,
                )

            if line is not None:
                line.quantity += amount
                logger.info(
                    f"Item {item_id} already in cart {cart.cart_id}, quantity now {line.quantity}",
                    extra=_context(user_id, cart),
                )
            else:
                item = self.catalog.get_item(item_id)
                cart.items.append(CartItem(item_id=item_id, quantity=amount, price=item.price))
                logger.info(
                    f"Added item {item_id} x{amount} to cart {cart.cart_id}", extra=_context(user_id, cart)
                )

            return self._commit(user_id, cart)

    def update_quantity(self, user_id: str, item_id: str, quantity: Any) -> CartResult:
        """Set the quantity of an existing line (absolute, not incremental)."""
        with self._user_lock(user_id):
            amount = normalize_quantity(quantity)
            if amount is None:
                return self._fail(
                    self._get_or_create(user_id),
                    CartErrorKind.INVALID_QUANTITY,
                    "Quantity must be a positive integer",
                    user_id,
                )

            cart = self._get_or_create(user_id)
            line = cart.find_item(item_id)
            if line is None:
                return self._fail(
                    cart, CartErrorKind.ITEM_NOT_IN_CART, "Item not found in cart", user_id
                )

            line.quantity = amount
            logger.info(
                f"Updated item {item_id} quantity to {amount} in cart {cart.cart_id}",
                extra=_context(user_id, cart),
            )
            return self._commit(user_id, cart)

    def remove_item(self, user_id: str, item_id: str) -> CartResult:
        """Drop a line. An emptied cart is still saved."""
        with self._user_lock(user_id):
            cart = self._get_or_create(user_id)
            if cart.find_item(item_id) is None:
                return self._fail(
                    cart, CartErrorKind.ITEM_NOT_IN_CART, "Item not found in cart", user_id
                )

            cart.items = [other for other in cart.items if other.item_id != item_id]
            logger.info(f"Removed item {item_id} from cart {cart.cart_id}", extra=_context(user_id, cart))
            return self._commit(user_id, cart)
