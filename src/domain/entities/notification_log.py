"""Notification delivery log entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class DeliveryStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class NotificationLog:
    """One delivery attempt for a recipient on a channel."""

    correlation_id: str
    notification_type: str
    channel: str
    audience: str
    user_id: str
    status: DeliveryStatus
    id: UUID = field(default_factory=uuid4)
    recipient: str | None = None
    center_id: str | None = None
    error: str | None = None
    template: str | None = None
    locale: str | None = None
    requires_audit: bool = False
    metadata: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
