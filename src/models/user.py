"""User model."""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin, new_uuid


class User(Base, TimestampMixin):
    """User model for authentication and note ownership."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    profile_picture = Column(Text, nullable=True)  # URL or data URI

    # Relationships
    notes = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
