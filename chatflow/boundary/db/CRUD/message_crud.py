"""
Message CRUD operations.

Append-only access to chat messages, always ordered by creation time.

Dependencies: sqlalchemy, chatflow.boundary.db.models
System role: Chat message persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chatflow.boundary.db.models.message_model import MessageModel
from chatflow.boundary.db.CRUD.base_crud import BaseCRUD


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[MessageModel]:
        """
        Retrieve all messages of a session in chronological order.

        Args:
            session: Async database session
            session_id: Parent session UUID

        Returns:
            Sequence of MessageModels ordered by created_at ascending
        """
        stmt = (
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def latest_created_at(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> datetime | None:
        """
        Creation time of the newest message in a session.

        Returns:
            datetime of the newest message, None for an empty session
        """
        stmt = select(func.max(MessageModel.created_at)).where(
            MessageModel.session_id == session_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


message_crud = MessageCRUD()
