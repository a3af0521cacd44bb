"""In-process event bus for host events.

The host (or the Mongo reply watcher) emits ``chat.message.didReceive``
whenever the assistant finishes a reply; the bridge subscribes to relay it.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

REPLY_EVENT = "chat.message.didReceive"

Handler = Callable[[Any], Awaitable[None]]


class Subscription:
    """Handle returned by :meth:`EventBus.on`; ``dispose()`` unsubscribes."""

    def __init__(self, bus: "EventBus", event: str, handler: Handler) -> None:
        self._bus = bus
        self._event = event
        self._handler = handler
        self.active = True

    def dispose(self) -> None:
        if self.active:
            self._bus._remove(self._event, self._handler)
            self.active = False


class EventBus:
    """Minimal async pub/sub keyed by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> Subscription:
        self._handlers[event].append(handler)
        return Subscription(self, event, handler)

    def _remove(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def emit(self, event: str, payload: Any = None) -> None:
        """Run every handler for ``event``; one failing handler does not stop the rest."""
        handlers = list(self._handlers.get(event, []))
        results = await asyncio.gather(
            *(handler(payload) for handler in handlers), return_exceptions=True
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Handler for {event} failed: {result}", exc_info=result)
