"""Pydantic schemas for API requests and responses."""

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
from src.schemas.note import NoteCreate, NoteResponse, NoteUpdate

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "ProfileUpdate",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "VerifyOTPRequest",
    "ResetPasswordRequest",
    "MessageResponse",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
]
