"""Notes service: owner-scoped CRUD with input normalization."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.models.note import DEFAULT_NOTE_TITLE, Note
from src.services.note_store import NoteFilters, NoteStore

logger = logging.getLogger(__name__)


def normalize_title(title: str | None) -> str:
    """Trimmed title, or "Untitled" when blank."""
    title = (title or "").strip()
    return title or DEFAULT_NOTE_TITLE


def normalize_tags(tags: str | None) -> str | None:
    """Strip each comma-separated label and drop empty ones."""
    if tags is None:
        return None
    labels = [label.strip() for label in tags.split(",")]
    joined = ",".join(label for label in labels if label)
    return joined or None


class NotesService:
    """Note operations on behalf of one authenticated user."""

    def __init__(self, db: Session):
        self.store = NoteStore(db)

    def list_notes(self, user_id: str, filters: NoteFilters | None = None) -> list[Note]:
        return self.store.list_notes(user_id, filters)

    def get_note(self, user_id: str, note_id: str) -> Note:
        return self.store.get(user_id, note_id)

    def create_note(
        self,
        user_id: str,
        title: str,
        content: str | None = None,
        tags: str | None = None,
    ) -> Note:
        note = self.store.create(
            user_id,
            title=normalize_title(title),
            content=content or "",
            tags=normalize_tags(tags),
        )
        logger.info(f"User {user_id} created note {note.id}")
        return note

    def update_note(self, user_id: str, note_id: str, changes: dict[str, Any]) -> Note:
        """Apply the non-null fields in ``changes``; an empty patch only bumps ``updated_at``."""
        patch: dict[str, Any] = {}
        if changes.get("title") is not None:
            patch["title"] = normalize_title(changes["title"])
        if changes.get("content") is not None:
            patch["content"] = changes["content"]
        if changes.get("tags") is not None:
            patch["tags"] = normalize_tags(changes["tags"])

        note = self.store.update(user_id, note_id, patch)
        logger.info(f"User {user_id} updated note {note_id}: {sorted(patch)}")
        return note

    def delete_note(self, user_id: str, note_id: str) -> None:
        self.store.delete(user_id, note_id)
        logger.info(f"User {user_id} deleted note {note_id}")
