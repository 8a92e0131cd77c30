import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from services.cart_service.auth import get_current_user_id
from services.cart_service.cart_service import CartService
from services.cart_service.models import CartErrorKind, CartResult, Item
from services.cart_service.schemas import AddItemRequest, CartResponse, UpdateQuantityRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_cart_service(request: Request) -> CartService:
    return request.app.state.cart_service


def _respond(result: CartResult, not_in_cart_status: int = status.HTTP_400_BAD_REQUEST) -> CartResponse:
    """Map a service result to a response, raising HTTPException for domain errors."""
    if result.error is not None:
        if result.error.kind == CartErrorKind.ITEM_NOT_IN_CART:
            raise HTTPException(status_code=not_in_cart_status, detail=result.error.message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error.message)
    return CartResponse.from_cart(result.cart)


# Public: the catalog needs no authentication.
@router.get("/items", response_model=List[Item], tags=["items"])
def list_items(service: CartService = Depends(get_cart_service)) -> List[Item]:
    """List available catalog items."""
    try:
        return service.catalog.list_all()
    except Exception as e:
        logger.error(f"Error listing items: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/cart", response_model=CartResponse, tags=["cart"])
def get_cart(
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    """Get the user's current cart, starting a new one if needed."""
    try:
        return CartResponse.from_cart(service.get_cart(user_id))
    except Exception as e:
        logger.error(f"Error getting cart: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/cart/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED, tags=["cart"])
def add_item(
    body: AddItemRequest,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    """Add item to cart."""
    if not body.item_id or not body.quantity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="item_id and quantity are required",
        )

    try:
        result = service.add_item(user_id, body.item_id, body.quantity)
    except Exception as e:
        logger.error(f"Error adding item to cart: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return _respond(result)


@router.put("/cart/items/{item_id}", response_model=CartResponse, tags=["cart"])
def update_item(
    item_id: str,
    body: UpdateQuantityRequest,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    """Set the quantity of an item already in the cart."""
    if not body.quantity:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="quantity is required")

    try:
        result = service.update_quantity(user_id, item_id, body.quantity)
    except Exception as e:
        logger.error(f"Error updating item quantity: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return _respond(result, not_in_cart_status=status.HTTP_404_NOT_FOUND)


@router.delete("/cart/items/{item_id}", response_model=CartResponse, tags=["cart"])
def remove_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    """Remove item from cart."""
    try:
        result = service.remove_item(user_id, item_id)
    except Exception as e:
        logger.error(f"Error removing item from cart: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return _respond(result, not_in_cart_status=status.HTTP_404_NOT_FOUND)
