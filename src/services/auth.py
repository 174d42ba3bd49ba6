"""Authentication service: accounts, login, profile and password reset."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.errors import InvalidCredentials, NotFoundError, ValidationFailed
from src.models.user import User
from src.services.otp import OTPService
from src.services.security import (
    PASSWORD_MIN_LENGTH,
    create_access_token,
    dummy_verify,
    get_password_hash,
    verify_password,
)
from src.services.user_store import UserStore
from src.tasks.email import queue_password_reset_code, queue_password_reset_success

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a reset code has been sent."


class AuthService:
    """Orchestrates the user store, password/token codec and reset codes."""

    def __init__(self, db: Session, otp_service: OTPService):
        self.users = UserStore(db)
        self.otp_service = otp_service

    @staticmethod
    def _check_password_policy(password: str, field: str) -> None:
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationFailed(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters", field=field
            )

    def signup(
        self,
        email: str,
        password: str,
        name: str | None = None,
        profile_picture: str | None = None,
    ) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        self._check_password_policy(password, "password")
        user = self.users.create(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            profile_picture=profile_picture,
        )
        logger.info(f"User {user.id} signed up")
        return user

    def login(self, email: str, password: str) -> tuple[str, User]:
        """Return a bearer token and the user.

        Unknown email and wrong password raise the same InvalidCredentials.
        """
        user = self.users.get_by_email(email)
        if user is None:
            dummy_verify()
            logger.warning("Login failed")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.warning("Login failed")
            raise InvalidCredentials()

        logger.info(f"User {user.id} logged in")
        return create_access_token(user.id), user

    def profile(self, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        """Apply name/picture changes; change the password only if the current one verifies.

        ``changes`` holds only the fields the client sent.
        """
        user = self.profile(user_id)
        patch = {
            field: changes[field] for field in ("name", "profile_picture") if field in changes
        }

        new_password = changes.get("new_password")
        if new_password:
            current_password = changes.get("current_password")
            if not current_password or not verify_password(current_password, user.password_hash):
                logger.warning(f"Password change rejected for user {user_id}")
                raise InvalidCredentials("Current password is incorrect")
            self._check_password_policy(new_password, "newPassword")
            patch["password_hash"] = get_password_hash(new_password)

        user = self.users.update(user_id, patch)
        logger.info(f"User {user_id} updated profile fields: {sorted(patch)}")
        return user

    def delete_account(self, user_id: str) -> None:
        """Remove the user, their notes, and any pending reset code."""
        user = self.profile(user_id)
        email = user.email
        self.users.delete(user_id)
        self.otp_service.clear(email)
        logger.info(f"User {user_id} deleted their account")

    def forgot_password(self, email: str) -> str:
        """Queue a reset code if the account exists. The reply never says whether it does."""
        user = self.users.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return FORGOT_PASSWORD_MESSAGE

        code = self.otp_service.issue(email)
        queue_password_reset_code(email, code, user.name)
        return FORGOT_PASSWORD_MESSAGE

    def verify_reset_code(self, email: str, code: str) -> None:
        """Check a code without consuming it, so the reset step can still use it."""
        self.otp_service.check(email, code)

    def reset_password(self, email: str, code: str, new_password: str) -> User:
        """Consume the code and replace the password; the code proves control of the email."""
        self._check_password_policy(new_password, "newPassword")
        self.otp_service.verify(email, code)

        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        user = self.users.update(user.id, {"password_hash": get_password_hash(new_password)})
        logger.info(f"User {user.id} reset their password")
        queue_password_reset_success(email, user.name)
        return user
