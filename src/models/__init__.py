"""SQLAlchemy models."""

from src.models.note import Note
from src.models.user import User

__all__ = [
    "User",
    "Note",
]
