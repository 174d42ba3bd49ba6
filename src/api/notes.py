"""Notes API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_current_user, get_notes_service
from src.models.enums import DateFilter, NoteSortField, SortOrder
from src.models.user import User
from src.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from src.services.note_store import NoteFilters
from src.services.notes import NotesService

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=list[NoteResponse])
async def get_notes(
    current_user: Annotated[User, Depends(get_current_user)],
    notes_service: Annotated[NotesService, Depends(get_notes_service)],
    search: Annotated[str | None, Query(max_length=255)] = None,
    sort_by: Annotated[NoteSortField, Query(alias="sortBy")] = NoteSortField.UPDATED,
    sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = SortOrder.DESC,
    date_filter: Annotated[DateFilter, Query(alias="dateFilter")] = DateFilter.ALL,
):
    """Get the current user's notes, most recently updated first by default."""
    filters = NoteFilters(
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        date_filter=date_filter,
    )
    return notes_service.list_notes(current_user.id, filters)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    notes_service: Annotated[NotesService, Depends(get_notes_service)],
):
    """Create a new note."""
    return notes_service.create_note(
        current_user.id,
        title=note_data.title,
        content=note_data.content,
        tags=note_data.tags,
    )


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    notes_service: Annotated[NotesService, Depends(get_notes_service)],
):
    """Get a specific note."""
    return notes_service.get_note(current_user.id, note_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    note_data: NoteUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    notes_service: Annotated[NotesService, Depends(get_notes_service)],
):
    """Update any subset of title, content and tags."""
    return notes_service.update_note(
        current_user.id, note_id, note_data.model_dump(exclude_unset=True)
    )


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    notes_service: Annotated[NotesService, Depends(get_notes_service)],
):
    """Delete a note."""
    notes_service.delete_note(current_user.id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
