"""Change events shared between the persistence layer and connected clients."""

from chatflow.core.events.change_notifier import ChangeNotifier, Unsubscribe

__all__ = ["ChangeNotifier", "Unsubscribe"]
