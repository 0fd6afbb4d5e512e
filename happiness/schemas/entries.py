"""Pydantic schemas for journal entries."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from happiness.schemas.base import BaseSchema, IDMixin


# Request schemas
class EntryCreate(BaseSchema):
    """Request to submit a journal entry. Content is stored exactly as sent."""

    model_config = ConfigDict(str_strip_whitespace=False)

    content: str | None = None


# Response schemas
class EntryRead(BaseSchema, IDMixin):
    """Persisted entry with its generated advice."""

    user_id: int
    content: str
    ai_response: str | None
    created_at: datetime


class EntrySubmitResponse(BaseModel):
    """Entry pipeline result."""

    entry: EntryRead
    recommendation: str


class EntryListResponse(BaseModel):
    """Page of a user's entry history, newest first."""

    entries: list[EntryRead]
