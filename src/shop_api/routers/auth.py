from fastapi import APIRouter, Depends, status

from shop_api.dependencies import get_user_service
from shop_api.schemas import (
    ApiResponse,
    CurrentUser,
    EmailVerificationStatus,
    MessageResponse,
    TokenStatus,
    User,
)
from shop_api.security import Principal, get_current_principal
from shop_api.services import UserService

router = APIRouter(prefix="/auth")


@router.post(
    "/create-profile",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[User],
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Profile already exists"}},
)
def create_profile(
    principal: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    """Create the caller's profile from the claims in their ID token."""
    user = users.create_profile(principal)
    return {"message": "User profile created successfully", "data": user}


@router.get("/me", response_model=ApiResponse[CurrentUser])
def get_me(
    principal: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    profile = users.get_user(principal.uid)
    return {
        "data": {
            "uid": principal.uid,
            "email": principal.email,
            "email_verified": principal.email_verified,
            "name": principal.name,
            "picture": principal.picture,
            "profile_exists": profile is not None,
            "profile": profile,
        }
    }


@router.get("/verify-email", response_model=ApiResponse[EmailVerificationStatus])
def verify_email(principal: Principal = Depends(get_current_principal)):
    return {"data": {"email_verified": principal.email_verified, "email": principal.email}}


@router.post("/logout", response_model=MessageResponse)
def logout(principal: Principal = Depends(get_current_principal)):
    """Tokens are discarded by the client; the API keeps no session to end."""
    return {"message": "Logged out successfully"}


@router.post("/refresh-token", response_model=ApiResponse[TokenStatus])
def refresh_token(principal: Principal = Depends(get_current_principal)):
    return {"message": "Token is valid", "data": {"uid": principal.uid, "email": principal.email}}
