"""Domain event bus protocol."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

EventHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


class IEventBus(Protocol):
    """Publish/subscribe channel for domain events."""

    def subscribe(self, event_id: str, handler: EventHandler) -> None:
        """Register a handler for an event identifier."""
        ...

    async def publish(self, event_id: str, payload: dict[str, Any]) -> None:
        """Deliver an event to every subscribed handler."""
        ...
