"""
Attachment ORM model.

Metadata record for a file uploaded to blob storage alongside a user message.

Dependencies: sqlalchemy, chatflow.boundary.db.base
System role: Attachment metadata persistence
"""

from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatflow.boundary.db.base import Base, UUIDMixin, CreatedAtMixin


class AttachmentModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Attachment ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        message_id: Foreign key to MessageModel (cascade delete)
        file_name: Original file name
        content_type: Declared MIME type
        size_bytes: File size in bytes
        storage_path: Blob storage key ({owner_id}/{message_id}/{timestamp}.{ext})
        created_at: Record creation timestamp (UTC)

    Constraints:
        message_id: Foreign key ON DELETE CASCADE to chat_messages.id
    """

    __tablename__ = "chat_attachments"

    message_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chat_messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Message this attachment belongs to",
    )

    file_name: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Blob storage key",
    )

    message = relationship("MessageModel", back_populates="attachments")
