"""
User-visible notifications.

The toast channel of the chat UI: orchestration and view models push
notifications here; the presentation layer drains or listens.

Dependencies: logging
System role: Error/status reporting to the user
"""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """One toast: a title, a description and its visual variant."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


class NotificationCenter:
    """Bounded history of notifications with optional live listeners."""

    def __init__(self, max_history: int = 50) -> None:
        self._history: deque[Notification] = deque(maxlen=max_history)
        self._listeners: list[Callable[[Notification], None]] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"{__name__}:notify - Listener failed: {type(e).__name__}: {e}")
        return notification

    def error(self, description: str, title: str = "Error") -> Notification:
        return self.notify(title, description, NotificationVariant.DESTRUCTIVE)

    def add_listener(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        """Register a listener; returns the callable that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def items(self) -> list[Notification]:
        return list(self._history)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self._history if n.variant is NotificationVariant.DESTRUCTIVE]

    def drain(self) -> list[Notification]:
        """Return and forget every notification shown so far."""
        items = list(self._history)
        self._history.clear()
        return items
