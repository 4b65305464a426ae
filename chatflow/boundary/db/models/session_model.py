"""
Session ORM model.

Represents a named chat conversation owned by one user and bound to one
model identifier.

Dependencies: sqlalchemy, chatflow.boundary.db.base
System role: Session persistence for chat context management
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatflow.boundary.db.base import Base, UUIDMixin, TimestampMixin


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model.

    Each session is one conversation thread. Its messages (and their
    attachments) are deleted with it.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Display title derived from the first message
        model: Model identifier sent with every turn
        owner_id: Opaque id of the owning user
        messages: Messages of this session ordered by creation time (cascading delete)
        created_at: Session creation timestamp (UTC)
        updated_at: Last activity timestamp (UTC), bumped on every persisted message

    Relationships:
        messages: One-to-many with MessageModel (cascade delete on session removal)
    """

    __tablename__ = "chat_sessions"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Session title (first 50 chars of the first message)",
    )

    model: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Model identifier used for inference",
    )

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Owning user id",
    )

    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.created_at",
    )
