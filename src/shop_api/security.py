"""
Bearer-token authentication.

ID tokens are issued by Firebase Authentication on the client. The API only
verifies them and exposes the decoded identity as a ``Principal``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth

from shop_api.config.settings import Settings
from shop_api.errors import AuthenticationError, PermissionDeniedError
from shop_api.firebase import get_firebase_app

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Firebase ID token")


@dataclass(frozen=True)
class Principal:
    """The authenticated identity behind a request."""

    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    name: Optional[str] = None
    picture: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        return cls(
            uid=claims["uid"],
            email=claims.get("email"),
            email_verified=bool(claims.get("email_verified", False)),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens with the Admin SDK."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def verify(self, token: str) -> Principal:
        app = get_firebase_app(self.settings)
        try:
            claims = firebase_auth.verify_id_token(
                token, app=app, check_revoked=self.settings.check_revoked
            )
        except firebase_auth.ExpiredIdTokenError:
            raise AuthenticationError(
                "Your authentication token has expired. Please log in again.",
                error="Token expired",
            )
        except firebase_auth.RevokedIdTokenError:
            raise AuthenticationError(
                "Your authentication token has been revoked. Please log in again.",
                error="Token revoked",
            )
        except firebase_auth.UserDisabledError:
            raise AuthenticationError("This account has been disabled.", error="Account disabled")
        except (firebase_auth.InvalidIdTokenError, ValueError) as e:
            logger.warning(f"Token verification failed: {e}")
            raise AuthenticationError("Please provide a valid authentication token")
        return Principal.from_claims(claims)


def get_token_verifier(request: Request):
    return request.app.state.token_verifier


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier=Depends(get_token_verifier),
) -> Principal:
    """Require a valid bearer token."""
    if credentials is None:
        raise AuthenticationError(
            "Please provide a valid authentication token",
            error="Access token required",
        )
    principal = verifier.verify(credentials.credentials)
    request.state.principal = principal
    return principal


def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier=Depends(get_token_verifier),
) -> Optional[Principal]:
    """Resolve the caller when a valid token is sent; anonymous otherwise."""
    if credentials is None:
        return None
    try:
        principal = verifier.verify(credentials.credentials)
    except AuthenticationError as e:
        logger.info(f"Ignoring invalid token on optional-auth route: {e.message}")
        return None
    request.state.principal = principal
    return principal


def require_verified_email(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.email_verified:
        raise PermissionDeniedError(
            "Please verify your email address before accessing this resource",
            error="Email verification required",
        )
    return principal
