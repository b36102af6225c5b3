"""In-process event bus."""

import asyncio
from collections import defaultdict
from typing import Any

import structlog

from domain.repositories.event_bus import EventHandler

logger = structlog.get_logger()


class InMemoryEventBus:
    """Delivers events to handlers in the publishing process.

    Handlers for one event run concurrently. A failing handler is logged
    and never propagates to the publisher or to sibling handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_id: str, handler: EventHandler) -> None:
        """Register a handler for an event identifier."""
        self._handlers[event_id].append(handler)

    def handlers_for(self, event_id: str) -> list[EventHandler]:
        return list(self._handlers.get(event_id, []))

    async def publish(self, event_id: str, payload: dict[str, Any]) -> None:
        """Deliver an event to every subscribed handler."""
        handlers = self.handlers_for(event_id)
        if not handlers:
            logger.debug("event_without_subscribers", event_id=event_id)
            return

        results = await asyncio.gather(
            *(handler(event_id, payload) for handler in handlers),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "event_handler_failed",
                    event_id=event_id,
                    error=str(result),
                    error_type=type(result).__name__,
                )
