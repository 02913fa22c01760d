from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from shop_api.dependencies import get_order_service
from shop_api.schemas import (
    ApiResponse,
    Order,
    OrderCreate,
    PageQueryParams,
    PaginatedResponse,
    PaymentIntent,
    PaymentIntentRequest,
    paginate,
)
from shop_api.security import Principal, require_verified_email
from shop_api.services import OrderService

router = APIRouter(prefix="/orders")

OrderId = Annotated[str, Path(description="ID of the order", min_length=1)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Order])
def create_order(
    body: OrderCreate,
    principal: Principal = Depends(require_verified_email),
    orders: OrderService = Depends(get_order_service),
):
    """
    Place an order.

    Each line must reference a design that exists and is public or owned by
    the caller. Line prices come from the shop's base t-shirt price.
    """
    order = orders.create_order(
        principal.uid,
        [item.model_dump() for item in body.items],
        body.shipping_address.model_dump(),
        body.payment_method,
    )
    return {"message": "Order created successfully", "data": order}


@router.get("/mine", response_model=PaginatedResponse[Order])
def list_my_orders(
    query_params: Annotated[PageQueryParams, Query()],
    principal: Principal = Depends(require_verified_email),
    orders: OrderService = Depends(get_order_service),
):
    items = orders.list_orders(principal.uid, limit=query_params.limit, offset=query_params.offset)
    return paginate(items, query_params)


@router.post("/payment-intent", response_model=ApiResponse[PaymentIntent])
def create_payment_intent(
    body: PaymentIntentRequest,
    principal: Principal = Depends(require_verified_email),
    orders: OrderService = Depends(get_order_service),
):
    intent = orders.create_payment_intent(body.amount, body.currency, buyer_id=principal.uid)
    return {"data": intent}


@router.get("/{order_id}", response_model=ApiResponse[Order])
def get_order(
    order_id: OrderId,
    principal: Principal = Depends(require_verified_email),
    orders: OrderService = Depends(get_order_service),
):
    return {"data": orders.get_order(order_id, principal.uid)}


@router.post("/{order_id}/cancel", response_model=ApiResponse[Order])
def cancel_order(
    order_id: OrderId,
    principal: Principal = Depends(require_verified_email),
    orders: OrderService = Depends(get_order_service),
):
    order = orders.cancel_order(order_id, principal.uid)
    return {"message": "Order cancelled successfully", "data": order}
