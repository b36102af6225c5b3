"""Notification sender protocol."""

from typing import Protocol

from domain.entities.payload import DeliveryResult, NotificationPayload


class INotificationSender(Protocol):
    """Transport that delivers a fully built channel payload."""

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        """Deliver the payload and report the outcome."""
        ...
