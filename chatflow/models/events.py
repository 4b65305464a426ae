"""
Change-event schemas for the session list WebSocket.

Dependencies: pydantic
System role: Realtime session-list protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ChangeEventType(str, Enum):
    """Server-to-client event types."""

    CONNECTED = "connected"
    SESSIONS_CHANGED = "sessions_changed"
    PONG = "pong"
    ERROR = "error"


class ClientEventType(str, Enum):
    """Client-to-server event types."""

    PING = "ping"


class ChangeEvent(BaseModel):
    """
    Event pushed to session-list subscribers.

    Attributes:
        event: Event type identifier
        data: Event-specific payload (empty for sessions_changed)
    """

    event: ChangeEventType
    data: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}
