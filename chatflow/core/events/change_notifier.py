"""
Session-list change notifier.

A payload-free publish/subscribe channel: every committed create, update
or delete of a session publishes "something changed" and each subscriber
refetches the full list.

Usage:
    notifier = ChangeNotifier()

    async def on_change():
        await sidebar.refresh()

    unsubscribe = notifier.subscribe(on_change)
    notifier.publish()
    ...
    unsubscribe()

Publishes that arrive before a delivery runs coalesce into that delivery,
so subscribers must tolerate redundant or batched refreshes.

Dependencies: asyncio
System role: Fan-out of session-list change signals
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class ChangeNotifier:
    """Fan-out of "sessions changed" signals to every current subscriber."""

    def __init__(self, coalesce_delay: float = 0.0) -> None:
        """
        Args:
            coalesce_delay: Seconds to wait before delivering, letting
                bursts of writes collapse into one signal
        """
        self._subscribers: dict[int, ChangeHandler] = {}
        self._next_token = 0
        self._pending = False
        self._delivery: asyncio.Task | None = None
        self._coalesce_delay = coalesce_delay
        self.deliveries = 0

    def subscribe(self, on_change: ChangeHandler) -> Unsubscribe:
        """
        Register a handler and return the callable that removes it.

        The same handler may be subscribed more than once. Each subscription
        is released independently.
        """
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = on_change
        logger.debug(f"{__name__}:subscribe - token={token}")

        def unsubscribe() -> None:
            if self._subscribers.pop(token, None) is not None:
                logger.debug(f"{__name__}:unsubscribe - token={token}")

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self) -> None:
        """Signal a change. Must be called from within the running loop."""
        self._pending = True
        if self._delivery is None or self._delivery.done():
            loop = asyncio.get_running_loop()
            self._delivery = loop.create_task(self._deliver())

    async def drain(self) -> None:
        """Wait until every pending signal has been delivered."""
        while self._delivery is not None and not self._delivery.done():
            await asyncio.shield(self._delivery)

    def close(self) -> None:
        """Drop all subscribers and cancel an undelivered signal."""
        self._subscribers.clear()
        self._pending = False
        if self._delivery is not None and not self._delivery.done():
            self._delivery.cancel()

    async def _deliver(self) -> None:
        while self._pending:
            await asyncio.sleep(self._coalesce_delay)
            self._pending = False
            self.deliveries += 1

            for token, handler in list(self._subscribers.items()):
                if token not in self._subscribers:
                    continue
                try:
                    result = handler()
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.error(f"{__name__}:_deliver - Handler failed (token={token}): {type(e).__name__}: {e}")
