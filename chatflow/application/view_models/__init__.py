"""Client-state view models for the chat UI."""

from chatflow.application.view_models.notifications import (
    Notification,
    NotificationCenter,
    NotificationVariant,
)
from chatflow.application.view_models.session_list_view_model import (
    SessionListItem,
    SessionListViewModel,
)
from chatflow.application.view_models.session_view_model import SessionViewModel

__all__ = [
    "Notification",
    "NotificationCenter",
    "NotificationVariant",
    "SessionListItem",
    "SessionListViewModel",
    "SessionViewModel",
]
