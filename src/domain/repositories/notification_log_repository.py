"""Notification delivery log repository protocol."""

from typing import List, Protocol

from domain.entities.notification_log import NotificationLog


class INotificationLogRepository(Protocol):
    """Repository interface for NotificationLog entries."""

    async def create_many(self, logs: List[NotificationLog]) -> List[NotificationLog]:
        """Persist a batch of delivery log entries."""
        ...

    async def list_by_correlation_id(self, correlation_id: str) -> List[NotificationLog]:
        """Get every log entry written for one dispatch, oldest first."""
        ...

    async def list_recent(
        self,
        limit: int = 50,
        notification_type: str | None = None,
    ) -> List[NotificationLog]:
        """Get the newest log entries, optionally filtered by type."""
        ...
