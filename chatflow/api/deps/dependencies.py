"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: chatflow.configs, chatflow.application, chatflow.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from chatflow.application.services.send_orchestrator import SendOrchestrator
from chatflow.application.view_models.session_view_model import SessionViewModel
from chatflow.boundary.aws.s3_client import S3AttachmentStore
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.boundary.inference.webhook_client import InferenceClient
from chatflow.configs import Settings, get_settings
from chatflow.core.events.change_notifier import ChangeNotifier


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._engine = None
        self._session_factory = None
        self._notifier = None
        self._gateway = None
        self._attachment_store = None
        self._inference_client = None

    @property
    def engine(self):
        """Get cached async engine."""
        if self._engine is None:
            from chatflow.boundary.db.connection import get_async_engine
            self._engine = get_async_engine()
        return self._engine

    @property
    def session_factory(self):
        """Get cached session factory bound to the engine."""
        if self._session_factory is None:
            from chatflow.boundary.db.connection import get_async_session_factory
            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def notifier(self) -> ChangeNotifier:
        """Get the process-wide session change notifier."""
        if self._notifier is None:
            self._notifier = ChangeNotifier()
        return self._notifier

    @property
    def gateway(self) -> PersistenceGateway:
        """Get cached persistence gateway."""
        if self._gateway is None:
            self._gateway = PersistenceGateway(
                session_factory=self.session_factory,
                notifier=self.notifier,
            )
        return self._gateway

    @property
    def attachment_store(self) -> S3AttachmentStore:
        """Get cached S3 attachment store."""
        if self._attachment_store is None:
            settings = get_settings()
            self._attachment_store = S3AttachmentStore(
                bucket=settings.attachments.bucket,
                region=settings.attachments.region,
            )
        return self._attachment_store

    @property
    def inference_client(self) -> InferenceClient:
        """Get cached webhook inference client."""
        if self._inference_client is None:
            from chatflow.boundary.inference.webhook_client import WebhookInferenceClient

            settings = get_settings()
            self._inference_client = WebhookInferenceClient(
                webhook_url=settings.inference.webhook_url,
                timeout_seconds=settings.inference.timeout_seconds,
            )
        return self._inference_client

    async def aclose(self) -> None:
        """Release network resources held by cached instances."""
        if self._inference_client is not None and hasattr(self._inference_client, "aclose"):
            await self._inference_client.aclose()
        if self._notifier is not None:
            self._notifier.close()
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._engine = None
        self._session_factory = None
        self._notifier = None
        self._gateway = None
        self._attachment_store = None
        self._inference_client = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """
    Identify the caller from the X-User-Id header.

    Raises:
        HTTPException(401): Header missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()


def get_notifier() -> ChangeNotifier:
    return get_service_cache().notifier


def get_gateway() -> PersistenceGateway:
    return get_service_cache().gateway


def get_attachment_store() -> S3AttachmentStore:
    return get_service_cache().attachment_store


def get_inference_client() -> InferenceClient:
    return get_service_cache().inference_client


def get_session_view_model(
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionViewModel:
    """
    Get a per-request view model for the calling user.

    Args:
        user_id: Caller identity (injected)
        gateway: Persistence gateway (injected)
        settings: Application settings (injected)

    Returns:
        SessionViewModel: Fresh view model with no active session
    """
    return SessionViewModel(
        gateway=gateway,
        current_user_id=user_id,
        default_model=settings.inference.default_model,
    )


def get_send_orchestrator(
    view_model: SessionViewModel = Depends(get_session_view_model),
    gateway: PersistenceGateway = Depends(get_gateway),
    inference_client: InferenceClient = Depends(get_inference_client),
    attachment_store: S3AttachmentStore = Depends(get_attachment_store),
) -> SendOrchestrator:
    """
    Get a send orchestrator bound to the request's view model.

    Returns:
        SendOrchestrator: Orchestrator sharing the injected view model
    """
    return SendOrchestrator(
        view_model=view_model,
        gateway=gateway,
        inference_client=inference_client,
        attachment_store=attachment_store,
    )
