"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_auth_service, get_current_user, get_current_user_id
from src.models.user import User
from src.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    MessageResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    UserLogin,
    UserResponse,
    UserSignup,
    VerifyOTPRequest,
)
from src.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    return auth_service.signup(
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        profile_picture=user_data.profile_picture,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    token, user = auth_service.login(credentials.email, credentials.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: Annotated[str, Depends(get_current_user_id)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    return auth_service.profile(user_id)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update name and picture, and optionally change the password."""
    return auth_service.update_profile(current_user.id, profile_data.model_dump(exclude_unset=True))


@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Delete the account together with all of its notes."""
    auth_service.delete_account(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Email a reset code. The response is identical whether or not the account exists."""
    message = auth_service.forgot_password(request.email)
    return ForgotPasswordResponse(
        message=message,
        expires_in_seconds=int(auth_service.otp_service.ttl.total_seconds()),
    )


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    request: VerifyOTPRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Check a reset code before asking for the new password."""
    auth_service.verify_reset_code(request.email, request.otp)
    return MessageResponse(message="Code verified")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Set a new password using a reset code."""
    auth_service.reset_password(request.email, request.otp, request.new_password)
    return MessageResponse(message="Password has been reset")
