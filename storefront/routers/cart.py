# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from storefront.dependencies import get_cart_owner, get_storage, require_owner
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartItemWithProduct,
    CartOwner,
    CartOwnerPayload,
)
from storefront.services.cart_service import CartService
from storefront.storage.base import Storage

router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService()


@router.get("", response_model=list[CartItemWithProduct])
def get_cart(
    owner: CartOwner = Depends(get_cart_owner),
    storage: Storage = Depends(get_storage),
):
    """
    Get a cart by `sessionId` (guest) or `customerId` (registered).

    Each line carries its product; `product` is null if it was deleted.
    """
    return service.get_cart(storage, owner)


@router.post(
    "",
    response_model=CartItemRead,
    status_code=status.HTTP_201_CREATED,
)
def add_to_cart(
    payload: CartItemCreate,
    storage: Storage = Depends(get_storage),
):
    """
    Add a product to a cart.

    Adding a product that is already in the cart merges into the
    existing line (quantities are summed) and returns that line.
    """
    return service.add_to_cart(storage, payload)


# Declared before /{item_id} so "clear" is not parsed as an item id
@router.delete("/clear")
@router.post("/clear")
def clear_cart(
    payload: CartOwnerPayload | None = Body(default=None),
    session_id: str | None = Query(default=None, alias="sessionId"),
    customer_id: uuid.UUID | None = Query(default=None, alias="customerId"),
    storage: Storage = Depends(get_storage),
) -> dict:
    """
    Remove every line of a cart.

    Owner keys may come from the JSON body or the query string.
    """
    if payload is not None:
        session_id = payload.session_id or session_id
        customer_id = payload.customer_id or customer_id

    owner = require_owner(session_id, customer_id)
    removed = service.clear_cart(storage, owner)
    return {"message": "Cart cleared successfully", "removed": removed}


@router.put("/{item_id}", response_model=CartItemRead)
@router.patch("/{item_id}", response_model=CartItemRead)
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    storage: Storage = Depends(get_storage),
):
    """
    Set the quantity of a cart line (must be >= 1).
    """
    return service.update_quantity(storage, item_id, payload.quantity)


@router.delete("/{item_id}")
def remove_cart_item(
    item_id: uuid.UUID,
    storage: Storage = Depends(get_storage),
) -> dict[str, str]:
    """
    Remove a line from the cart.
    """
    service.remove_item(storage, item_id)
    return {"message": "Item removed from cart"}
