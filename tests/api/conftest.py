"""
Fixtures for router tests.

Routers are mounted on a bare FastAPI app (no lifespan) and their
dependencies replaced through dependency_overrides.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chatflow.api.deps import (
    get_attachment_store,
    get_gateway,
    get_inference_client,
    get_notifier,
    get_settings_dependency,
)
from chatflow.api.routers import (
    catalog_router,
    chat_router,
    events_router,
    health_router,
    sessions_router,
)
from chatflow.configs import Settings
from chatflow.core.events.change_notifier import ChangeNotifier


@pytest.fixture
def mock_gateway() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_store() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_inference() -> AsyncMock:
    client = AsyncMock()
    client.dispatch.return_value = '{"output": "Hi there!"}'
    return client


@pytest.fixture
def api_notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def app(mock_gateway, mock_store, mock_inference, api_notifier) -> FastAPI:
    app = FastAPI()
    for router in (health_router, catalog_router, sessions_router, chat_router, events_router):
        app.include_router(router, prefix="/api/v1")

    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.dependency_overrides[get_attachment_store] = lambda: mock_store
    app.dependency_overrides[get_inference_client] = lambda: mock_inference
    app.dependency_overrides[get_notifier] = lambda: api_notifier
    app.dependency_overrides[get_settings_dependency] = lambda: Settings()
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
