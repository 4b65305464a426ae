"""
Test suite for PersistenceGateway against an in-memory SQLite database.

Tests message ordering, idempotent reloads, monotonic session activity,
cascading delete, list ordering and change publication.

System role: Verification of the persistence boundary
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.core.exceptions import NotFoundError
from chatflow.models.chat import MessageRole


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def frozen_gateway(test_session_factory, notifier, clock) -> PersistenceGateway:
    return PersistenceGateway(session_factory=test_session_factory, notifier=notifier, clock=clock)


class TestSessions:
    async def test_create_and_get_session(self, gateway, user_id):
        # Act
        created = await gateway.create_session(owner_id=user_id, title="Hello", model="gpt-4-mini")
        loaded = await gateway.get_session(created.id)

        # Assert
        assert loaded == created
        assert loaded.title == "Hello"
        assert loaded.owner_id == user_id
        assert loaded.created_at == loaded.updated_at
        assert loaded.updated_at.tzinfo is not None

    async def test_get_missing_session_raises_not_found(self, gateway):
        missing = uuid.uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            await gateway.get_session(missing)

        assert exc_info.value.entity_id == missing

    async def test_list_sessions_most_recent_first(self, frozen_gateway, clock, user_id):
        # Arrange
        first = await frozen_gateway.create_session(user_id, "first", "gpt-4")
        clock.advance(1)
        second = await frozen_gateway.create_session(user_id, "second", "gpt-4")
        clock.advance(1)
        await frozen_gateway.touch_session(first.id)

        # Act
        sessions = await frozen_gateway.list_sessions(owner_id=user_id)

        # Assert
        assert [s.id for s in sessions] == [first.id, second.id]

    async def test_list_sessions_scoped_to_owner(self, gateway, user_id):
        await gateway.create_session(user_id, "mine", "gpt-4")
        await gateway.create_session("someone-else", "theirs", "gpt-4")

        sessions = await gateway.list_sessions(owner_id=user_id)

        assert [s.title for s in sessions] == ["mine"]

    async def test_list_sessions_pagination(self, frozen_gateway, clock, user_id):
        for index in range(3):
            await frozen_gateway.create_session(user_id, f"s{index}", "gpt-4")
            clock.advance(1)

        page = await frozen_gateway.list_sessions(owner_id=user_id, limit=1, offset=1)

        assert [s.title for s in page] == ["s1"]

    async def test_update_session_model(self, frozen_gateway, clock, user_id):
        session = await frozen_gateway.create_session(user_id, "t", "gpt-4-mini")
        clock.advance(5)

        updated = await frozen_gateway.update_session_model(session.id, "claude-opus-4")

        assert updated.model == "claude-opus-4"
        assert updated.updated_at > session.updated_at

    async def test_update_missing_session_model_raises(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.update_session_model(uuid.uuid4(), "gpt-4")


class TestTouchSession:
    async def test_touch_advances_updated_at(self, frozen_gateway, clock, user_id):
        session = await frozen_gateway.create_session(user_id, "t", "gpt-4")
        clock.advance(10)

        touched = await frozen_gateway.touch_session(session.id)

        assert touched.updated_at == clock.now

    async def test_touch_never_moves_backwards(self, frozen_gateway, clock, user_id):
        # Arrange
        session = await frozen_gateway.create_session(user_id, "t", "gpt-4")
        earlier = session.updated_at - timedelta(hours=1)

        # Act
        touched = await frozen_gateway.touch_session(session.id, at=earlier)

        # Assert
        assert touched.updated_at == session.updated_at

    async def test_touch_missing_session_raises(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.touch_session(uuid.uuid4())


class TestMessages:
    async def test_messages_listed_in_creation_order(self, gateway, user_id):
        # Arrange
        session = await gateway.create_session(user_id, "t", "gpt-4")
        contents = ["one", "two", "three", "four"]
        for index, content in enumerate(contents):
            role = MessageRole.USER if index % 2 == 0 else MessageRole.ASSISTANT
            await gateway.append_message(session.id, role, content)

        # Act
        messages = await gateway.list_messages(session.id)

        # Assert
        assert [m.content for m in messages] == contents
        assert all(a.created_at < b.created_at for a, b in zip(messages, messages[1:]))

    async def test_same_instant_messages_still_strictly_ordered(self, frozen_gateway, user_id):
        session = await frozen_gateway.create_session(user_id, "t", "gpt-4")

        first = await frozen_gateway.append_message(session.id, MessageRole.USER, "q")
        second = await frozen_gateway.append_message(session.id, MessageRole.ASSISTANT, "a")

        assert second.created_at > first.created_at
        assert [m.id for m in await frozen_gateway.list_messages(session.id)] == [first.id, second.id]

    async def test_reload_without_writes_is_identical(self, gateway, user_id):
        session = await gateway.create_session(user_id, "t", "gpt-4")
        await gateway.append_message(session.id, MessageRole.USER, "Hello")
        await gateway.append_message(session.id, MessageRole.ASSISTANT, "Hi")

        first_load = await gateway.list_messages(session.id)
        second_load = await gateway.list_messages(session.id)

        assert first_load == second_load

    async def test_content_stored_verbatim(self, gateway, user_id):
        session = await gateway.create_session(user_id, "t", "gpt-4")
        raw = '{"output": "wrapped"}'

        message = await gateway.append_message(session.id, MessageRole.ASSISTANT, raw)

        assert (await gateway.get_message(message.id)).content == raw

    async def test_append_to_missing_session_raises(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.append_message(uuid.uuid4(), MessageRole.USER, "orphan")


class TestAttachments:
    async def test_create_and_list_attachments(self, gateway, user_id):
        session = await gateway.create_session(user_id, "t", "gpt-4")
        message = await gateway.append_message(session.id, MessageRole.USER, "see file")

        record = await gateway.create_attachment(
            message_id=message.id,
            file_name="notes.txt",
            content_type="text/plain",
            size_bytes=5,
            storage_path=f"{user_id}/{message.id}/1.txt",
        )

        assert await gateway.list_attachments(message.id) == [record]

    async def test_attachment_for_missing_message_raises(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.create_attachment(uuid.uuid4(), "a.txt", "text/plain", 1, "k")


class TestDeleteSession:
    async def test_delete_cascades_to_messages_and_attachments(self, gateway, user_id):
        # Arrange
        session = await gateway.create_session(user_id, "t", "gpt-4")
        message = await gateway.append_message(session.id, MessageRole.USER, "hi")
        await gateway.create_attachment(message.id, "a.txt", "text/plain", 1, "k")

        # Act
        await gateway.delete_session(session.id)

        # Assert
        with pytest.raises(NotFoundError):
            await gateway.get_session(session.id)
        assert await gateway.list_messages(session.id) == []
        assert await gateway.list_attachments(message.id) == []

    async def test_delete_leaves_other_sessions(self, gateway, user_id):
        keep = await gateway.create_session(user_id, "keep", "gpt-4")
        await gateway.append_message(keep.id, MessageRole.USER, "stay")
        drop = await gateway.create_session(user_id, "drop", "gpt-4")

        await gateway.delete_session(drop.id)

        assert len(await gateway.list_messages(keep.id)) == 1

    async def test_delete_missing_session_raises(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.delete_session(uuid.uuid4())


class TestChangePublication:
    async def test_session_writes_publish_changes(self, gateway, notifier, user_id):
        # Arrange
        signals = []
        notifier.subscribe(lambda: signals.append(1))

        # Act
        session = await gateway.create_session(user_id, "t", "gpt-4")
        await notifier.drain()
        await gateway.touch_session(session.id)
        await notifier.drain()
        await gateway.delete_session(session.id)
        await notifier.drain()

        # Assert
        assert len(signals) == 3

    async def test_message_writes_do_not_publish(self, gateway, notifier, user_id):
        session = await gateway.create_session(user_id, "t", "gpt-4")
        await notifier.drain()
        signals = []
        notifier.subscribe(lambda: signals.append(1))

        await gateway.append_message(session.id, MessageRole.USER, "hi")
        await notifier.drain()

        assert signals == []

    async def test_ping(self, gateway):
        await gateway.ping()
