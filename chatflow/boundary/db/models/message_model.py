"""
Message ORM model.

Dependencies: sqlalchemy, chatflow.boundary.db.base
System role: Append-only chat message persistence
"""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatflow.boundary.db.base import Base, UUIDMixin, CreatedAtMixin


class MessageModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Message ORM model.

    Messages are immutable once written. Within a session they are ordered
    by created_at, which the gateway keeps strictly increasing.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Foreign key to SessionModel (cascade delete)
        role: "user" or "assistant"
        content: Message text; assistant content is the raw webhook response
        created_at: Creation timestamp (UTC)

    Constraints:
        session_id: Foreign key ON DELETE CASCADE to chat_sessions.id
    """

    __tablename__ = "chat_messages"

    session_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Session this message belongs to",
    )

    role: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        doc="Message author role (user, assistant)",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Message text",
    )

    session = relationship("SessionModel", back_populates="messages")
    attachments = relationship(
        "AttachmentModel",
        back_populates="message",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
