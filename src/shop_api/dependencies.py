"""FastAPI dependencies that build services from the resources on ``app.state``."""

from fastapi import Request

from shop_api.config.settings import Settings
from shop_api.services import CartService, DesignService, ImageService, OrderService, UserService


def get_user_service(request: Request) -> UserService:
    return UserService(request.app.state.document_store)


def get_design_service(request: Request) -> DesignService:
    return DesignService(request.app.state.document_store)


def get_order_service(request: Request) -> OrderService:
    settings: Settings = request.app.state.settings
    return OrderService(request.app.state.document_store, settings.base_tshirt_price)


def get_cart_service(request: Request) -> CartService:
    settings: Settings = request.app.state.settings
    return CartService(request.app.state.document_store, settings.base_tshirt_price)


def get_image_service(request: Request) -> ImageService:
    return ImageService(
        request.app.state.settings,
        request.app.state.s3_client,
        request.app.state.document_store,
    )
