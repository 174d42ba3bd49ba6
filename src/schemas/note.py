"""Note schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NoteCreate(BaseModel):
    """Create a new note. A blank title is saved as "Untitled"."""

    title: str = Field(..., max_length=255)
    content: str = Field("", description="HTML content from the editor")
    tags: str | None = Field(None, max_length=500, description="Comma-separated labels")


class NoteUpdate(BaseModel):
    """Update a note. Only fields present in the request are applied."""

    title: str | None = Field(None, max_length=255)
    content: str | None = None
    tags: str | None = Field(None, max_length=500)


class NoteResponse(BaseModel):
    """Note response."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    content: str
    tags: str | None
    user_id: str
    created_at: datetime
    updated_at: datetime
