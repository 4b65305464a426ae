"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite gateway, change notifier, fake inference client,
mocked attachment store
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from chatflow.core.exceptions import TransportError


class FakeInferenceClient:
    """Records dispatched requests and answers with a canned reply or error."""

    def __init__(self, reply: str = "Hi there!", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.requests = []

    async def dispatch(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with the chat schema.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool
    from chatflow.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    from chatflow.boundary.db.connection import get_async_session_factory

    return get_async_session_factory(test_engine)


@pytest.fixture
async def notifier():
    from chatflow.core.events.change_notifier import ChangeNotifier

    notifier = ChangeNotifier()
    yield notifier
    await notifier.drain()
    notifier.close()


@pytest.fixture
def gateway(test_session_factory, notifier):
    """Persistence gateway over the in-memory database."""
    from chatflow.boundary.db.gateway import PersistenceGateway

    return PersistenceGateway(session_factory=test_session_factory, notifier=notifier)


@pytest.fixture
def user_id() -> str:
    return "user-123"


@pytest.fixture
def inference_client() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def failing_inference_client() -> FakeInferenceClient:
    return FakeInferenceClient(
        error=TransportError("Webhook request failed: Bad Gateway", status_code=502)
    )


@pytest.fixture
def mock_attachment_store() -> MagicMock:
    """
    Create mock S3AttachmentStore.

    Returns:
        MagicMock: Store whose upload returns the storage key it would use
    """
    store = MagicMock()

    async def upload(owner_id, message_id, file, timestamp_ms=None):
        return f"{owner_id}/{message_id}/1700000000000.{file.extension}"

    store.upload = AsyncMock(side_effect=upload)
    return store


@pytest.fixture
def sample_session_id() -> uuid.UUID:
    return uuid.uuid4()
