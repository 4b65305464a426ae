"""
Active-session view model.

Holds what one chat window shows: the active session, its messages in
display order, the selected model and the sending/loading flags. The
send orchestrator writes into it; everything else reads from it.

Dependencies: chatflow.boundary.db.gateway
System role: Client-state mirror of the active conversation
"""

import logging
from uuid import UUID

from chatflow.application.view_models.notifications import NotificationCenter
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.core.exceptions import NotFoundError, PersistenceError
from chatflow.models.catalog import DEFAULT_MODEL
from chatflow.models.chat import MessageRecord
from chatflow.models.session import SessionRecord

logger = logging.getLogger(__name__)


class SessionViewModel:
    """
    State of the active conversation.

    Attributes:
        active_session: The session being shown, or None for a fresh chat
        messages: Messages of the active session, ascending by created_at
        selected_model: Model used for the next turn (and for a new session)
        sending: True while a submission is in flight
        loading: True while a session is being (re)loaded
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        current_user_id: str,
        default_model: str = DEFAULT_MODEL,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.gateway = gateway
        self.current_user_id = current_user_id
        self.default_model = default_model
        self.notifications = notifications or NotificationCenter()

        self.active_session: SessionRecord | None = None
        self.messages: list[MessageRecord] = []
        self.selected_model = default_model
        self.sending = False
        self.loading = False
        self._load_generation = 0

    @property
    def active_session_id(self) -> UUID | None:
        return self.active_session.id if self.active_session else None

    def adopt_session(
        self,
        session: SessionRecord,
        messages: list[MessageRecord] | None = None,
    ) -> None:
        """Make a session active, replacing whatever was shown before."""
        self._load_generation += 1
        self.active_session = session
        self.messages = sorted(messages or [], key=lambda m: m.created_at)
        self.selected_model = session.model

    def new_session(self) -> None:
        """Return to the empty "new chat" state."""
        self._load_generation += 1
        self.active_session = None
        self.messages = []
        self.selected_model = self.default_model
        self.loading = False

    async def select_session(self, session_id: UUID) -> bool:
        """
        Load a session and its messages and make it active.

        When selects overlap only the most recent one applies its result.

        Args:
            session_id: Session to show

        Returns:
            bool: True if the session was loaded and is now active
        """
        self._load_generation += 1
        generation = self._load_generation
        self.loading = True
        try:
            session = await self.gateway.get_session(session_id)
            messages = await self.gateway.list_messages(session_id)
        except NotFoundError as e:
            logger.warning(f"{__name__}:select_session - {e.message}")
            if generation == self._load_generation:
                self.new_session()
            self.notifications.error("Failed to load chat")
            return False
        except PersistenceError as e:
            logger.error(f"{__name__}:select_session - {type(e).__name__}: {e}")
            self.notifications.error("Failed to load chat")
            return False
        finally:
            if generation == self._load_generation:
                self.loading = False

        if generation != self._load_generation:
            logger.debug(f"{__name__}:select_session - Superseded load of {session_id} ignored")
            return False

        self.adopt_session(session, messages)
        return True

    async def change_model(self, model_id: str) -> bool:
        """
        Switch the model for subsequent turns.

        The local value changes first; when a session is active the new
        model is also persisted. A failed write keeps the local value.

        Returns:
            bool: False if persisting the change failed
        """
        self.selected_model = model_id
        session = self.active_session
        if session is None:
            return True

        self.active_session = session.model_copy(update={"model": model_id})
        try:
            await self.gateway.update_session_model(session.id, model_id)
        except PersistenceError as e:
            logger.error(f"{__name__}:change_model - {type(e).__name__}: {e}")
            self.notifications.error("Failed to update model")
            return False
        return True

    async def delete_session(self, session_id: UUID) -> bool:
        """
        Delete a session; deleting the active one returns to a fresh chat.

        A session that is already gone counts as deleted.
        """
        try:
            await self.gateway.delete_session(session_id)
        except NotFoundError:
            logger.warning(f"{__name__}:delete_session - Session {session_id} already deleted")
        except PersistenceError as e:
            logger.error(f"{__name__}:delete_session - {type(e).__name__}: {e}")
            self.notifications.error("Failed to delete chat")
            return False

        if self.active_session_id == session_id:
            self.new_session()
        self.notifications.notify("Chat deleted", "The chat has been removed successfully.")
        return True

    def surface_message(self, message: MessageRecord) -> bool:
        """
        Show a persisted message if it belongs to the active session.

        Returns:
            bool: True if the message was added to the mirror
        """
        if self.active_session is None or message.session_id != self.active_session.id:
            return False
        if any(existing.id == message.id for existing in self.messages):
            return False

        self.messages.append(message)
        if len(self.messages) > 1 and self.messages[-2].created_at > message.created_at:
            self.messages.sort(key=lambda m: m.created_at)
        return True

    def note_activity(self, session: SessionRecord) -> None:
        """Take a fresher updated_at for the active session, keeping the local model."""
        if self.active_session is not None and self.active_session.id == session.id:
            self.active_session = self.active_session.model_copy(
                update={"updated_at": session.updated_at}
            )
