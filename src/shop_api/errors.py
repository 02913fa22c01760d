"""Exceptions raised by the services and the handlers that turn them into responses."""

import logging
from typing import Any, Optional

import pydantic
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(self, message: str, error: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if error:
            self.error = error
        self.details = details


class InvalidRequestError(ShopError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request"


class AuthenticationError(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid token"


class PermissionDeniedError(ShopError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Access denied"


class NotFoundError(ShopError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class ConflictError(ShopError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class PayloadTooLargeError(ShopError):
    status_code = 413
    error = "File too large"


def error_body(error: str, message: str, details: Any = None) -> dict:
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body


async def handle_shop_errors(request: Request, exc: ShopError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.message, exc.details),
        headers=headers,
    )


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Validation failed",
            "Please check your input data",
            jsonable_encoder(
                [{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in exc.errors()]
            ),
        ),
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=422,
        content=error_body(
            "Validation failed",
            "The server produced or received an invalid document",
            jsonable_encoder([{"msg": err["msg"], "loc": err["loc"]} for err in errors]),
        ),
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of a route."""
    try:
        return await call_next(request)
    except Exception as err:
        logger.exception(err)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", "An unexpected error occurred"),
        )
