"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_attachment_store,
    get_current_user_id,
    get_gateway,
    get_inference_client,
    get_notifier,
    get_send_orchestrator,
    get_service_cache,
    get_session_view_model,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_attachment_store",
    "get_current_user_id",
    "get_gateway",
    "get_inference_client",
    "get_notifier",
    "get_send_orchestrator",
    "get_service_cache",
    "get_session_view_model",
    "get_settings_dependency",
]
