"""
models.py - Cart Domain Models

Pydantic models shared by the catalog, the cart store and the cart service.

    Item               - catalog entry (read-only)
    CartItem           - one line in a cart with a frozen unit price
    Cart               - line items, total and lifecycle timestamps
    CartVersionRecord  - a cart as kept by the store, stamped in epoch ms
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Item(BaseModel):
    """Catalog item."""

    item_id: str
    name: str
    price: float = Field(ge=0)
    description: Optional[str] = None


class CartItem(BaseModel):
    """Cart line. `price` is the unit price captured when the line was added."""

    item_id: str
    quantity: int = Field(ge=1)
    price: float


class Cart(BaseModel):
    """Shopping cart."""

    cart_id: str
    items: List[CartItem] = Field(default_factory=list)
    total: float = 0.0
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    def find_item(self, item_id: str) -> Optional[CartItem]:
        for line in self.items:
            if line.item_id == item_id:
                return line
        return None


class CartVersionRecord(BaseModel):
    """Cart plus the store's write timestamp (milliseconds since epoch)."""

    cart: Cart
    updated_at: int


class CartErrorKind(str, Enum):
    """Expected, recoverable failures of cart operations."""

    INVALID_QUANTITY = "InvalidQuantity"
    ITEM_NOT_FOUND = "ItemNotFound"
    CART_FULL = "CartFull"
    ITEM_NOT_IN_CART = "ItemNotInCart"


class CartError(BaseModel):
    kind: CartErrorKind
    message: str


class CartResult(BaseModel):
    """Outcome of a cart mutation: the resulting (or unchanged) cart and an optional error."""

    cart: Cart
    error: Optional[CartError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
