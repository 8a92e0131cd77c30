from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from services.cart_service.models import Cart


class AddItemRequest(BaseModel):
    """Request model for adding item to cart."""

    item_id: Optional[str] = None
    quantity: Any = None  # validated by CartService, not coerced here


class UpdateQuantityRequest(BaseModel):
    """Request model for updating item quantity."""

    quantity: Any = None  # validated by CartService, not coerced here


class CartItemResponse(BaseModel):
    """Response model for cart item."""

    item_id: str
    quantity: int
    price: float
    item_total: float


class CartResponse(BaseModel):
    """Response model for cart."""

    cart_id: str
    items: List[CartItemResponse]
    total: float
    item_count: int
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(
            cart_id=cart.cart_id,
            items=[
                CartItemResponse(
                    item_id=line.item_id,
                    quantity=line.quantity,
                    price=line.price,
                    item_total=line.price * line.quantity,
                )
                for line in cart.items
            ],
            total=cart.total,
            item_count=len(cart.items),
            created_at=cart.created_at,
            updated_at=cart.updated_at,
            expires_at=cart.expires_at,
        )


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str
