"""
Session domain records and schemas.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from chatflow.models.common import Record
from chatflow.models.rendering import truncate_title

DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 50


def derive_title(text: str | None) -> str:
    """First 50 characters of the first message, or the placeholder title."""
    if text:
        title = text[:TITLE_MAX_LENGTH]
        if title.strip():
            return title
    return DEFAULT_TITLE


class SessionRecord(Record):
    """Persisted session as seen by the application layer."""

    id: uuid.UUID
    title: str
    model: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CreateSessionRequest(BaseModel):
    """Request schema for creating a new session."""

    title: str | None = Field(default=None, description="Optional title, derived when omitted")
    model: str | None = Field(default=None, description="Model identifier, default when omitted")


class ChangeModelRequest(BaseModel):
    """Request schema for switching a session's model."""

    model: str = Field(description="Model identifier from the catalog")


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    id: uuid.UUID
    title: str
    display_title: str
    model: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionResponse":
        return cls(
            id=record.id,
            title=record.title,
            display_title=truncate_title(record.title),
            model=record.model,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
