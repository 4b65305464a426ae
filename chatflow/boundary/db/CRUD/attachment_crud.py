"""
Attachment CRUD operations.

Dependencies: sqlalchemy, chatflow.boundary.db.models
System role: Attachment metadata persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatflow.boundary.db.models.attachment_model import AttachmentModel
from chatflow.boundary.db.CRUD.base_crud import BaseCRUD


class AttachmentCRUD(BaseCRUD[AttachmentModel]):
    """CRUD operations for AttachmentModel."""

    def __init__(self) -> None:
        """Initialize AttachmentCRUD with AttachmentModel."""
        super().__init__(AttachmentModel)

    async def list_for_message(
        self,
        session: AsyncSession,
        message_id: UUID,
    ) -> Sequence[AttachmentModel]:
        """
        Retrieve the attachments recorded for a message.

        Args:
            session: Async database session
            message_id: Parent message UUID

        Returns:
            Sequence of AttachmentModels ordered by created_at ascending
        """
        stmt = (
            select(AttachmentModel)
            .where(AttachmentModel.message_id == message_id)
            .order_by(AttachmentModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


attachment_crud = AttachmentCRUD()
