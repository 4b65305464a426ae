"""
Session list (sidebar) view model.

Mirrors the user's sessions, most recently active first, and refetches
the full list whenever the change notifier fires.

Dependencies: chatflow.boundary.db.gateway, chatflow.core.events
System role: Live session list for the chat UI
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from chatflow.application.view_models.notifications import NotificationCenter
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.core.events.change_notifier import ChangeNotifier, Unsubscribe
from chatflow.core.exceptions import PersistenceError
from chatflow.models.rendering import truncate_title
from chatflow.models.session import SessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionListItem:
    id: UUID
    title: str
    display_title: str
    model: str
    updated_at: datetime


class SessionListViewModel:
    """Live list of one user's sessions."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: ChangeNotifier,
        owner_id: str,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.gateway = gateway
        self.notifier = notifier
        self.owner_id = owner_id
        self.notifications = notifications or NotificationCenter()

        self.sessions: list[SessionRecord] = []
        self.loading = True
        self.refresh_count = 0
        self._refresh_generation = 0
        self._unsubscribe: Unsubscribe | None = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def items(self) -> list[SessionListItem]:
        return [
            SessionListItem(
                id=session.id,
                title=session.title,
                display_title=truncate_title(session.title),
                model=session.model,
                updated_at=session.updated_at,
            )
            for session in self.sessions
        ]

    async def mount(self) -> None:
        """Subscribe to change signals and fetch the initial list."""
        if self._unsubscribe is None:
            self._unsubscribe = self.notifier.subscribe(self.refresh)
        await self.refresh()

    def unmount(self) -> None:
        """Stop listening for changes. Calling it twice is harmless."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh(self) -> None:
        """Refetch the whole list. Only the newest refresh may apply its result."""
        self._refresh_generation += 1
        generation = self._refresh_generation
        try:
            sessions = await self.gateway.list_sessions(owner_id=self.owner_id)
        except PersistenceError as e:
            if generation == self._refresh_generation:
                logger.error(f"{__name__}:refresh - {type(e).__name__}: {e}")
                self.notifications.error("Failed to load chat history")
            return
        finally:
            if generation == self._refresh_generation:
                self.loading = False

        if generation != self._refresh_generation:
            logger.debug(f"{__name__}:refresh - Dropped stale result (generation={generation})")
            return
        self.sessions = sessions
        self.refresh_count += 1
