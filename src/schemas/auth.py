"""Authentication and profile schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from src.services.otp import OTP_LENGTH
from src.services.security import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH

CAMEL_CASE = ConfigDict(alias_generator=to_camel, populate_by_name=True)

OTP_PATTERN = rf"^\d{{{OTP_LENGTH}}}$"


class UserSignup(BaseModel):
    """User signup request."""

    model_config = CAMEL_CASE

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    name: str | None = Field(None, max_length=255)
    profile_picture: str | None = None


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class UserResponse(BaseModel):
    """Public user projection; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    name: str | None
    profile_picture: str | None
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Login response with bearer token and user info."""

    model_config = CAMEL_CASE

    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class ProfileUpdate(BaseModel):
    """Partial profile update. A password change needs the current password."""

    model_config = CAMEL_CASE

    name: str | None = Field(None, max_length=255)
    profile_picture: str | None = None
    current_password: str | None = Field(None, max_length=PASSWORD_MAX_LENGTH)
    new_password: str | None = Field(
        None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )

    @model_validator(mode="after")
    def require_current_password(self) -> "ProfileUpdate":
        if self.new_password and not self.current_password:
            raise ValueError("currentPassword is required to set a new password")
        return self


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., max_length=255)


class ForgotPasswordResponse(BaseModel):
    model_config = CAMEL_CASE

    message: str
    expires_in_seconds: int


class VerifyOTPRequest(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    otp: str = Field(..., pattern=OTP_PATTERN)


class ResetPasswordRequest(BaseModel):
    model_config = CAMEL_CASE

    email: EmailStr = Field(..., max_length=255)
    otp: str = Field(..., pattern=OTP_PATTERN)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )


class MessageResponse(BaseModel):
    message: str
