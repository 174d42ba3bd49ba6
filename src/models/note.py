"""Note model."""

from sqlalchemy import Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin, new_uuid

DEFAULT_NOTE_TITLE = "Untitled"


class Note(Base, TimestampMixin):
    """A rich-text note owned by exactly one user."""

    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String(255), nullable=False, default=DEFAULT_NOTE_TITLE)
    content = Column(Text, nullable=False, default="")  # HTML from the editor
    tags = Column(String(500), nullable=True)  # comma-separated labels
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    owner = relationship("User", back_populates="notes")

    __table_args__ = (Index("ix_notes_user_updated", "user_id", "updated_at"),)
