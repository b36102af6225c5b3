"""Wires domain events to the notification dispatcher."""

from collections.abc import Iterable
from typing import Any

import structlog

from domain.entities.events import all_event_ids
from domain.repositories.event_bus import IEventBus
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


def register_notification_listeners(
    bus: IEventBus,
    service: NotificationService,
    event_ids: Iterable[str] | None = None,
) -> list[str]:
    """Subscribe the dispatcher to every known domain event.

    Unmapped events are subscribed too so that they are logged at the
    severity their name suggests. Returns the subscribed identifiers.
    """

    async def handle(event_id: str, payload: dict[str, Any]) -> None:
        await service.dispatch(event_id, payload)

    subscribed = list(event_ids) if event_ids is not None else all_event_ids()
    for event_id in subscribed:
        bus.subscribe(event_id, handle)

    logger.info("notification_listeners_registered", count=len(subscribed))
    return subscribed
