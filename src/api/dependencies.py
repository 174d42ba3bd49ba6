"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import InvalidToken
from src.models.user import User
from src.services.auth import AuthService
from src.services.notes import NotesService
from src.services.otp import OTPService, OTPStore
from src.services.security import decode_access_token
from src.services.user_store import UserStore

security = HTTPBearer(auto_error=False)


def get_otp_store(request: Request) -> OTPStore:
    """The store built at startup; the memory backend must be shared across requests."""
    return request.app.state.otp_store


def get_otp_service(
    store: Annotated[OTPStore, Depends(get_otp_store)],
) -> OTPService:
    return OTPService(store)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    otp_service: Annotated[OTPService, Depends(get_otp_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, otp_service)


def get_notes_service(
    db: Annotated[Session, Depends(get_db)],
) -> NotesService:
    """Get notes service with dependencies."""
    return NotesService(db)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """User id from a valid ``Authorization: Bearer <token>`` header."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidToken("Not authenticated")
    return decode_access_token(credentials.credentials)


def get_current_user(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user; a token for a deleted user is rejected."""
    user = UserStore(db).get_by_id(user_id)
    if user is None:
        raise InvalidToken()
    return user
