"""Persistence for user accounts."""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import ConflictError, NotFoundError
from src.models.mixins import utcnow
from src.models.user import User

# Columns a profile patch may touch
UPDATABLE_USER_FIELDS = ("name", "profile_picture", "password_hash")


class UserStore:
    """Lookups and mutations of ``users`` rows."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(
        self,
        email: str,
        password_hash: str,
        name: str | None = None,
        profile_picture: str | None = None,
    ) -> User:
        """Insert a user. Raises ConflictError if the email is taken."""
        if self.get_by_email(email) is not None:
            raise ConflictError("Email already registered")

        user = User(
            email=email,
            password_hash=password_hash,
            name=name,
            profile_picture=profile_picture,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same email
            self.db.rollback()
            raise ConflictError("Email already registered") from e
        self.db.refresh(user)
        return user

    def update(self, user_id: str, patch: dict[str, Any]) -> User:
        """Apply a partial update in one statement; ``updated_at`` always advances."""
        values = {field: value for field, value in patch.items() if field in UPDATABLE_USER_FIELDS}
        values["updated_at"] = utcnow()

        updated = (
            self.db.query(User).filter(User.id == user_id).update(values, synchronize_session=False)
        )
        if not updated:
            self.db.rollback()
            raise NotFoundError("User not found")
        self.db.commit()

        user = self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def delete(self, user_id: str) -> None:
        """Delete a user; the database cascades the delete to their notes."""
        deleted = (
            self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            raise NotFoundError("User not found")
        self.db.commit()
