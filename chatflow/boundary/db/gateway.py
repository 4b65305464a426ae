"""
Persistence gateway.

Single entry point for durable reads and writes of sessions, messages and
attachment records. Each call runs in its own transaction (atomic per
entity); nothing spans entities, so a message can exist whose session
timestamp bump later fails.

Every committed create/update/delete of a session is announced on the
change notifier so connected session lists refetch.

Dependencies: sqlalchemy, chatflow.boundary.db.CRUD, chatflow.core.events
System role: Persistence boundary for the orchestration pipeline
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatflow.boundary.db.CRUD.attachment_crud import attachment_crud
from chatflow.boundary.db.CRUD.message_crud import message_crud
from chatflow.boundary.db.CRUD.session_crud import session_crud
from chatflow.core.clock import ensure_utc, utc_now
from chatflow.core.events.change_notifier import ChangeNotifier
from chatflow.core.exceptions import NotFoundError, PersistenceError
from chatflow.models.attachment import AttachmentRecord
from chatflow.models.chat import MessageRecord, MessageRole
from chatflow.models.session import SessionRecord

logger = logging.getLogger(__name__)

MESSAGE_TICK = timedelta(microseconds=1)


class PersistenceGateway:
    """
    CRUD facade over the chat store.

    Returns immutable pydantic records rather than ORM rows so callers never
    touch a closed session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        notifier: ChangeNotifier | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize gateway.

        Args:
            session_factory: Async session factory bound to the chat database
            notifier: Change notifier signalled after session writes
            clock: Source of "now" (UTC); injectable for tests
        """
        self._session_factory = session_factory
        self._notifier = notifier
        self._clock = clock

    @asynccontextmanager
    async def _transaction(self, operation: str, entity: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
                raise PersistenceError(
                    f"{operation} failed",
                    operation=operation,
                    entity=entity,
                    details={"error": str(e)},
                ) from e

    def _sessions_changed(self) -> None:
        if self._notifier is not None:
            self._notifier.publish()

    def _next_activity(self, current: datetime, at: datetime | None = None) -> datetime:
        candidate = ensure_utc(at) if at is not None else self._clock()
        return max(ensure_utc(current), candidate)

    # Sessions

    async def create_session(self, owner_id: str, title: str, model: str) -> SessionRecord:
        """
        Create a session.

        Args:
            owner_id: Owning user id
            title: Session title
            model: Model identifier

        Returns:
            SessionRecord: The created session

        Raises:
            PersistenceError: If the insert fails
        """
        async with self._transaction("create_session", "session") as db:
            now = self._clock()
            row = await session_crud.create(
                db,
                owner_id=owner_id,
                title=title,
                model=model,
                created_at=now,
                updated_at=now,
            )
            record = SessionRecord.model_validate(row)
        logger.info(f"{__name__}:create_session - Created session {record.id}")
        self._sessions_changed()
        return record

    async def get_session(self, session_id: UUID) -> SessionRecord:
        """
        Load one session.

        Raises:
            NotFoundError: If the session does not exist
            PersistenceError: If the read fails
        """
        async with self._transaction("get_session", "session") as db:
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise NotFoundError("session", session_id)
            return SessionRecord.model_validate(row)

    async def list_sessions(
        self,
        owner_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[SessionRecord]:
        """
        List sessions, most recently active first.

        Args:
            owner_id: Restrict to one user's sessions
            limit: Maximum number of sessions
            offset: Number of sessions to skip

        Returns:
            list[SessionRecord]: Ordered by updated_at descending
        """
        async with self._transaction("list_sessions", "session") as db:
            rows = await session_crud.list_recent(db, owner_id=owner_id, limit=limit, offset=offset)
            return [SessionRecord.model_validate(row) for row in rows]

    async def update_session_model(self, session_id: UUID, model: str) -> SessionRecord:
        """
        Switch the model identifier of a session.

        Raises:
            NotFoundError: If the session does not exist
            PersistenceError: If the update fails
        """
        async with self._transaction("update_session_model", "session") as db:
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise NotFoundError("session", session_id)
            row = await session_crud.update_by_id(
                db,
                session_id,
                model=model,
                updated_at=self._next_activity(row.updated_at),
            )
            record = SessionRecord.model_validate(row)
        self._sessions_changed()
        return record

    async def touch_session(self, session_id: UUID, at: datetime | None = None) -> SessionRecord:
        """
        Bump a session's activity timestamp.

        The stored updated_at never moves backwards: the new value is the
        later of the stored one and ``at`` (default: now).

        Raises:
            NotFoundError: If the session does not exist
            PersistenceError: If the update fails
        """
        async with self._transaction("touch_session", "session") as db:
            row = await session_crud.get_by_id(db, session_id)
            if row is None:
                raise NotFoundError("session", session_id)
            row = await session_crud.update_by_id(
                db,
                session_id,
                updated_at=self._next_activity(row.updated_at, at),
            )
            record = SessionRecord.model_validate(row)
        self._sessions_changed()
        return record

    async def delete_session(self, session_id: UUID) -> None:
        """
        Delete a session with its messages and attachment records.

        Blobs in storage are not removed.

        Raises:
            NotFoundError: If the session does not exist
            PersistenceError: If the delete fails
        """
        async with self._transaction("delete_session", "session") as db:
            deleted = await session_crud.delete_cascade(db, session_id)
            if not deleted:
                raise NotFoundError("session", session_id)
        logger.info(f"{__name__}:delete_session - Deleted session {session_id}")
        self._sessions_changed()

    # Messages

    async def append_message(
        self,
        session_id: UUID,
        role: MessageRole,
        content: str,
    ) -> MessageRecord:
        """
        Append a message to a session.

        created_at is strictly greater than that of every earlier message of
        the session, so creation order and display order always agree.

        Args:
            session_id: Parent session UUID
            role: Message role
            content: Message text

        Returns:
            MessageRecord: The persisted message

        Raises:
            NotFoundError: If the session does not exist
            PersistenceError: If the insert fails
        """
        async with self._transaction("append_message", "message") as db:
            if not await session_crud.exists(db, session_id):
                raise NotFoundError("session", session_id)

            created_at = self._clock()
            latest = await message_crud.latest_created_at(db, session_id)
            if latest is not None and created_at <= ensure_utc(latest):
                created_at = ensure_utc(latest) + MESSAGE_TICK

            row = await message_crud.create(
                db,
                session_id=session_id,
                role=MessageRole(role).value,
                content=content,
                created_at=created_at,
            )
            return MessageRecord.model_validate(row)

    async def get_message(self, message_id: UUID) -> MessageRecord:
        """
        Load one message.

        Raises:
            NotFoundError: If the message does not exist
        """
        async with self._transaction("get_message", "message") as db:
            row = await message_crud.get_by_id(db, message_id)
            if row is None:
                raise NotFoundError("message", message_id)
            return MessageRecord.model_validate(row)

    async def list_messages(self, session_id: UUID) -> list[MessageRecord]:
        """
        Load a session's messages in chronological order.

        Returns:
            list[MessageRecord]: Ordered by created_at ascending
        """
        async with self._transaction("list_messages", "message") as db:
            rows = await message_crud.list_for_session(db, session_id)
            return [MessageRecord.model_validate(row) for row in rows]

    # Attachments

    async def create_attachment(
        self,
        message_id: UUID,
        file_name: str,
        content_type: str,
        size_bytes: int,
        storage_path: str,
    ) -> AttachmentRecord:
        """
        Record an uploaded attachment against its message.

        Raises:
            NotFoundError: If the message does not exist
            PersistenceError: If the insert fails
        """
        async with self._transaction("create_attachment", "attachment") as db:
            if not await message_crud.exists(db, message_id):
                raise NotFoundError("message", message_id)
            row = await attachment_crud.create(
                db,
                message_id=message_id,
                file_name=file_name,
                content_type=content_type,
                size_bytes=size_bytes,
                storage_path=storage_path,
            )
            return AttachmentRecord.model_validate(row)

    async def list_attachments(self, message_id: UUID) -> list[AttachmentRecord]:
        async with self._transaction("list_attachments", "attachment") as db:
            rows = await attachment_crud.list_for_message(db, message_id)
            return [AttachmentRecord.model_validate(row) for row in rows]

    async def ping(self) -> None:
        """Round-trip a trivial query; raises PersistenceError when the store is unreachable."""
        async with self._transaction("ping", "database") as db:
            await db.execute(text("SELECT 1"))
