from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from shop_api.dependencies import get_cart_service
from shop_api.schemas import (
    ApiResponse,
    Cart,
    CartItemIn,
    CartQuantityUpdate,
    CheckoutRequest,
    Order,
)
from shop_api.security import Principal, get_current_principal, require_verified_email
from shop_api.services import CartService

router = APIRouter(prefix="/cart")

ItemId = Annotated[str, Path(description="ID of the cart line", min_length=1)]


@router.get("", response_model=ApiResponse[Cart])
def get_cart(
    principal: Principal = Depends(get_current_principal),
    carts: CartService = Depends(get_cart_service),
):
    return {"data": carts.get(principal.uid)}


@router.post("/items", response_model=ApiResponse[Cart])
def add_cart_item(
    body: CartItemIn,
    principal: Principal = Depends(get_current_principal),
    carts: CartService = Depends(get_cart_service),
):
    """Add a design to the cart. Adding the same design, size and color again raises the line's quantity."""
    cart = carts.add_item(principal.uid, body.design_id, body.quantity, body.size, body.color)
    return {"message": "Item added to cart", "data": cart}


@router.patch("/items/{item_id}", response_model=ApiResponse[Cart])
def update_cart_item(
    item_id: ItemId,
    body: CartQuantityUpdate,
    principal: Principal = Depends(get_current_principal),
    carts: CartService = Depends(get_cart_service),
):
    return {"data": carts.update_quantity(principal.uid, item_id, body.quantity)}


@router.delete("/items/{item_id}", response_model=ApiResponse[Cart])
def remove_cart_item(
    item_id: ItemId,
    principal: Principal = Depends(get_current_principal),
    carts: CartService = Depends(get_cart_service),
):
    return {"message": "Item removed from cart", "data": carts.remove_item(principal.uid, item_id)}


@router.delete("", response_model=ApiResponse[Cart])
def clear_cart(
    principal: Principal = Depends(get_current_principal),
    carts: CartService = Depends(get_cart_service),
):
    return {"message": "Cart cleared", "data": carts.clear(principal.uid)}


@router.post("/checkout", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Order])
def checkout(
    body: CheckoutRequest,
    principal: Principal = Depends(require_verified_email),
    carts: CartService = Depends(get_cart_service),
):
    order = carts.checkout(principal.uid, body.shipping_address.model_dump(), body.payment_method)
    return {"message": "Order created successfully", "data": order}
