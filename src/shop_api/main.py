from textwrap import dedent
import logging
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from database import DocumentStore, get_document_store, init_db
from shop_api.config.settings import Settings
from shop_api.errors import (
    ShopError,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
    handle_shop_errors,
)
from shop_api.firebase import get_firebase_app
from shop_api.routers.auth import router as auth_router
from shop_api.routers.carts import router as carts_router
from shop_api.routers.designs import router as designs_router
from shop_api.routers.health import router as health_router
from shop_api.routers.images import router as images_router
from shop_api.routers.orders import router as orders_router
from shop_api.routers.users import router as users_router
from shop_api.s3.client import get_s3_client
from shop_api.security import FirebaseTokenVerifier

# Set up logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)


def create_app(
    settings: Optional[Settings] = None,
    document_store: Optional[DocumentStore] = None,
    token_verifier=None,
    s3_client=None,
) -> FastAPI:
    """
    Create a FastAPI application.

    The document store, token verifier and S3 client are built from
    ``settings`` unless they are passed in.
    """
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="T-Shirt Shop API",
        summary="Design custom t-shirts, share them and order prints",
        version="v1",
        description=dedent(
            """\
        Backend for the t-shirt design app.

        | Resource | Notes |
        | --- | --- |
        | `/v1/auth`, `/v1/users` | Firebase ID token in `Authorization: Bearer <token>` |
        | `/v1/designs` | Browsing public designs needs no token |
        | `/v1/orders`, `/v1/cart/checkout` | Verified email required |
        | `/v1/images` | Images are stored per user in S3 |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if document_store is None:
        firebase_app = get_firebase_app(settings) if settings.deployment_mode == "cloud" else None
        document_store = get_document_store(settings.deployment_mode, settings.database_path, firebase_app)
    logger.info(f"Initializing document store for {settings.deployment_mode}")
    init_db(document_store)

    app.state.settings = settings
    app.state.document_store = document_store
    app.state.token_verifier = token_verifier or FirebaseTokenVerifier(settings)
    app.state.s3_client = s3_client or get_s3_client(settings)

    app.include_router(auth_router, prefix="/v1", tags=["auth"])
    app.include_router(users_router, prefix="/v1", tags=["users"])
    app.include_router(designs_router, prefix="/v1", tags=["designs"])
    app.include_router(orders_router, prefix="/v1", tags=["orders"])
    app.include_router(carts_router, prefix="/v1", tags=["cart"])
    app.include_router(images_router, prefix="/v1", tags=["images"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(ShopError, handle_shop_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"
