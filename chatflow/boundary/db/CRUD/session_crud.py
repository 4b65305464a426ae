"""
Session CRUD operations.

Provides Create, Read, Update, Delete operations for SessionModel
with session-specific query methods.

Dependencies: sqlalchemy, chatflow.boundary.db.models
System role: Session persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from chatflow.boundary.db.models.attachment_model import AttachmentModel
from chatflow.boundary.db.models.message_model import MessageModel
from chatflow.boundary.db.models.session_model import SessionModel
from chatflow.boundary.db.CRUD.base_crud import BaseCRUD


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with owner-scoped listing ordered by recent activity
    and an explicit cascading delete.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def list_recent(
        self,
        session: AsyncSession,
        owner_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[SessionModel]:
        """
        Retrieve sessions, most recently active first.

        Args:
            session: Async database session
            owner_id: Restrict to sessions of this user (None for all)
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip

        Returns:
            Sequence of SessionModels ordered by updated_at descending
        """
        stmt = select(SessionModel)
        if owner_id is not None:
            stmt = stmt.where(SessionModel.owner_id == owner_id)
        stmt = stmt.order_by(
            SessionModel.updated_at.desc(),
            SessionModel.created_at.desc(),
        ).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_cascade(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a session together with its messages and their attachments.

        Issued as explicit statements so the cascade does not depend on the
        backend enforcing foreign keys (SQLite does not by default).

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            True if the session existed and was deleted, False otherwise
        """
        message_ids = select(MessageModel.id).where(MessageModel.session_id == id)
        await session.execute(
            delete(AttachmentModel)
            .where(AttachmentModel.message_id.in_(message_ids))
            .execution_options(synchronize_session=False)
        )
        await session.execute(
            delete(MessageModel)
            .where(MessageModel.session_id == id)
            .execution_options(synchronize_session=False)
        )
        return await self.delete_by_id(session, id)


session_crud = SessionCRUD()
