"""
Chat domain records and schemas.

Request/response schemas for chat operations and the inference payload.

Dependencies: pydantic
System role: Chat API contracts
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from chatflow.models.attachment import FileMetadata, RejectedFileResponse
from chatflow.models.common import Record
from chatflow.models.rendering import unwrap_assistant_content
from chatflow.models.session import SessionResponse


class MessageRole(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageRecord(Record):
    """Persisted message as seen by the application layer."""

    id: uuid.UUID
    session_id: uuid.UUID
    role: MessageRole
    content: str
    created_at: datetime


class InferenceRequest(BaseModel):
    """JSON body POSTed to the inference webhook."""

    message: str
    model: str
    chat_id: uuid.UUID
    user_id: str
    files: list[FileMetadata] = Field(default_factory=list)


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    id: uuid.UUID
    role: MessageRole = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Stored message content")
    display_content: str = Field(description="Content prepared for rendering")
    created_at: datetime

    @classmethod
    def from_record(cls, record: MessageRecord) -> "ChatMessageResponse":
        return cls(
            id=record.id,
            role=record.role,
            content=record.content,
            display_content=unwrap_assistant_content(record.role.value, record.content),
            created_at=record.created_at,
        )


class SessionDetailResponse(BaseModel):
    """A session together with its ordered messages."""

    session: SessionResponse
    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")


class ChatTurnResponse(BaseModel):
    """Outcome of a completed chat turn."""

    session: SessionResponse
    user_message: ChatMessageResponse
    assistant_message: ChatMessageResponse
    attachments_saved: int = Field(description="Attachments recorded for the user message")
    rejected_files: list[RejectedFileResponse] = Field(default_factory=list)
