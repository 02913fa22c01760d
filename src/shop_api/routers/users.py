from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shop_api.dependencies import get_design_service, get_order_service, get_user_service
from shop_api.schemas import (
    ApiResponse,
    Design,
    MessageResponse,
    Order,
    PageQueryParams,
    PaginatedResponse,
    Preferences,
    PreferencesUpdate,
    ProfileUpdate,
    User,
    paginate,
)
from shop_api.security import Principal, get_current_principal, require_verified_email
from shop_api.services import DesignService, OrderService, UserService

router = APIRouter(prefix="/users")


@router.get("/profile", response_model=ApiResponse[User])
def get_profile(
    principal: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    return {"data": users.require_user(principal.uid)}


@router.put("/profile", response_model=ApiResponse[User])
def update_profile(
    body: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    """
    Replace the caller's profile details.

    Fields left out of the body are reset to empty values.
    """
    user = users.update_profile(principal.uid, body.profile.model_dump())
    return {"message": "Profile updated successfully", "data": user}


@router.put("/preferences", response_model=ApiResponse[Preferences])
def update_preferences(
    body: PreferencesUpdate,
    principal: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    preferences = users.update_preferences(principal.uid, body.model_dump(exclude_none=True))
    return {"message": "Preferences updated successfully", "data": preferences}


@router.get("/designs", response_model=PaginatedResponse[Design])
def list_user_designs(
    query_params: Annotated[PageQueryParams, Query()],
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    items = designs.list_user(principal.uid, limit=query_params.limit, offset=query_params.offset)
    return paginate(items, query_params)


@router.get("/orders", response_model=PaginatedResponse[Order])
def list_user_orders(
    query_params: Annotated[PageQueryParams, Query()],
    principal: Principal = Depends(get_current_principal),
    orders: OrderService = Depends(get_order_service),
):
    items = orders.list_orders(principal.uid, limit=query_params.limit, offset=query_params.offset)
    return paginate(items, query_params)


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    principal: Principal = Depends(require_verified_email),
    users: UserService = Depends(get_user_service),
):
    """Delete the caller's profile. The identity platform account itself is untouched."""
    users.delete_user(principal.uid)
    return {"message": "Account deleted successfully"}
