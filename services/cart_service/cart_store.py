"""
Cart Store Module

This module provides in-memory, history-preserving storage of shopping carts for the
Cart Service. It is a pure storage primitive: no TTL enforcement and no business rules.

Key Features:
    - Carts keyed by user ID, one ordered history per user
    - One CartVersionRecord per distinct cart ID ever saved for a user
    - Saving a known cart ID replaces its record in place; a new cart ID is appended
    - Every save stamps the stored cart's updated_at with the store's clock
    - Absence is a normal return value, never an exception

Data Format:
    {
        "user123": [
            CartVersionRecord(cart=Cart(cart_id="cart-1729350000000-a1b2c3d", ...), updated_at=1729350000000),
            CartVersionRecord(cart=Cart(cart_id="cart-1729351800001-x9y8z7w", ...), updated_at=1729351800001),
        ]
    }

Current Cart:
    The current cart is the LAST record of the user's history (array position), not the
    record with the largest timestamp. Expired carts are superseded by appending a new
    cart ID and are never pruned.

Example Usage:
    ```python
    store = CartStore()

    store.save("user123", cart)
    record = store.get_current("user123")
    # record.cart.cart_id == cart.cart_id

    store.delete("user123", cart.cart_id)   # True
    store.clear("user123")
    ```
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from services.cart_service.models import Cart, CartVersionRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class CartStore:
    """In-memory store of cart histories keyed by user ID."""

    def __init__(self, clock: Optional[Clock] = None):
        """Initialize an empty store."""
        self._clock = clock or utc_now
        self._carts: Dict[str, List[CartVersionRecord]] = {}

    def get_current(self, user_id: str) -> Optional[CartVersionRecord]:
        """Return the most recent record for a user, or None."""
        history = self._carts.get(user_id)
        if not history:
            return None
        return history[-1]

    def get_all(self, user_id: str) -> List[CartVersionRecord]:
        """Return every record kept for a user, oldest first."""
        return list(self._carts.get(user_id, []))

    def save(self, user_id: str, cart: Cart) -> None:
        """Replace the record with the same cart ID in place, or append a new one."""
        history = self._carts.setdefault(user_id, [])
        now = self._clock()
        record = CartVersionRecord(
            cart=cart.model_copy(update={"updated_at": now}, deep=True),
            updated_at=to_epoch_ms(now),
        )

        for index, existing in enumerate(history):
            if existing.cart.cart_id == cart.cart_id:
                history[index] = record
                logger.debug(f"Replaced cart {cart.cart_id} for user {user_id}")
                return

        history.append(record)
        logger.debug(f"Appended cart {cart.cart_id} for user {user_id} ({len(history)} versions)")

    def delete(self, user_id: str, cart_id: str) -> bool:
        """Remove one cart from a user's history. Returns True if a record was removed."""
        history = self._carts.get(user_id)
        if history is None:
            return False

        remaining = [record for record in history if record.cart.cart_id != cart_id]
        if len(remaining) == len(history):
            return False

        self._carts[user_id] = remaining
        logger.info(f"Deleted cart {cart_id} for user {user_id}")
        return True

    def clear(self, user_id: str) -> None:
        """Drop a user's whole history."""
        self._carts.pop(user_id, None)
        logger.info(f"Cleared carts for user {user_id}")

    def list_users(self) -> Set[str]:
        """User IDs with a history (introspection only)."""
        return set(self._carts)
