"""
Attachment records and schemas.

Dependencies: pydantic
System role: Attachment API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from chatflow.models.common import Record


class AttachmentRecord(Record):
    """Persisted attachment metadata."""

    id: uuid.UUID
    message_id: uuid.UUID
    file_name: str
    content_type: str
    size_bytes: int
    storage_path: str
    created_at: datetime


class FileMetadata(BaseModel):
    """Attachment metadata forwarded to the inference endpoint (no bytes)."""

    name: str
    type: str
    size: int


class RejectedFileResponse(BaseModel):
    """A file refused by the attachment policy."""

    name: str
    reason: str = Field(description="too_large or unsupported_type")
    message: str


class AttachmentResponse(BaseModel):
    """Attachment listing entry with a temporary download URL."""

    id: uuid.UUID
    file_name: str
    content_type: str
    size_bytes: int
    storage_path: str
    download_url: str | None = None
    expires_at: datetime | None = None
