"""Persistence for notes, always scoped to the owning user."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from src.errors import NotFoundError
from src.models.enums import DateFilter, NoteSortField, SortOrder
from src.models.mixins import utcnow
from src.models.note import Note

# Columns a note patch may touch
UPDATABLE_NOTE_FIELDS = ("title", "content", "tags")

SORT_COLUMNS = {
    NoteSortField.CREATED: Note.created_at,
    NoteSortField.UPDATED: Note.updated_at,
    NoteSortField.TITLE: func.lower(Note.title),
}


@dataclass
class NoteFilters:
    """Options for listing a user's notes."""

    search: str | None = None
    sort_by: NoteSortField = NoteSortField.UPDATED
    sort_order: SortOrder = SortOrder.DESC
    date_filter: DateFilter = DateFilter.ALL


def window_start(date_filter: DateFilter, now: datetime | None = None) -> datetime | None:
    """Earliest ``updated_at`` a note may have to pass ``date_filter``."""
    now = now or datetime.now(UTC)
    if date_filter == DateFilter.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_filter == DateFilter.WEEK:
        return now - timedelta(days=7)
    if date_filter == DateFilter.MONTH:
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NoteStore:
    """Queries and mutations of ``notes`` rows.

    Every operation takes the owner's id; a note id alone never reaches a row.
    Not-owned and missing notes both raise NotFoundError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: str) -> Query:
        return self.db.query(Note).filter(Note.user_id == user_id)

    def list_notes(self, user_id: str, filters: NoteFilters | None = None) -> list[Note]:
        filters = filters or NoteFilters()
        query = self._owned(user_id)

        if filters.search and filters.search.strip():
            term = escape_like(filters.search.strip())
            query = query.filter(Note.title.ilike(f"%{term}%", escape="\\"))

        since = window_start(filters.date_filter)
        if since is not None:
            query = query.filter(Note.updated_at >= since)

        column = SORT_COLUMNS[filters.sort_by]
        if filters.sort_order == SortOrder.ASC:
            query = query.order_by(column.asc(), Note.id.asc())
        else:
            query = query.order_by(column.desc(), Note.id.desc())

        return query.all()

    def get(self, user_id: str, note_id: str) -> Note:
        note = self._owned(user_id).filter(Note.id == note_id).first()
        if note is None:
            raise NotFoundError("Note not found")
        return note

    def create(self, user_id: str, title: str, content: str = "", tags: str | None = None) -> Note:
        note = Note(title=title, content=content, tags=tags, user_id=user_id)
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    def update(self, user_id: str, note_id: str, patch: dict[str, Any]) -> Note:
        """Apply only the supplied fields; ``updated_at`` advances even for an empty patch.

        The ownership predicate is part of the UPDATE itself, so there is no
        read-then-write window.
        """
        values = {field: value for field, value in patch.items() if field in UPDATABLE_NOTE_FIELDS}
        values["updated_at"] = utcnow()

        updated = (
            self._owned(user_id)
            .filter(Note.id == note_id)
            .update(values, synchronize_session=False)
        )
        if not updated:
            self.db.rollback()
            raise NotFoundError("Note not found")
        self.db.commit()
        return self.get(user_id, note_id)

    def delete(self, user_id: str, note_id: str) -> None:
        deleted = self._owned(user_id).filter(Note.id == note_id).delete(synchronize_session=False)
        if not deleted:
            self.db.rollback()
            raise NotFoundError("Note not found")
        self.db.commit()
