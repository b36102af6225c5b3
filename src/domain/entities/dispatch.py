"""Recipient and result types used while dispatching notifications."""

from dataclasses import dataclass, field
from typing import Any

from domain.entities.notification import NotificationChannel, ProfileType


@dataclass(frozen=True, slots=True)
class ProfileInfo:
    """Profile a recipient acts under for this event."""

    profile_type: ProfileType | None = None
    profile_id: str | None = None


@dataclass(frozen=True, slots=True)
class RecipientInfo:
    """One addressee of a dispatch.

    Contact fields are optional; a channel whose address is missing is
    skipped for that recipient.
    """

    user_id: str
    audience: str
    email: str | None = None
    phone: str | None = None
    locale: str | None = None
    center_id: str | None = None
    profile_type: ProfileType | None = None
    profile_id: str | None = None
    template_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RecipientError:
    """A failed delivery attempt for one recipient."""

    recipient_id: str
    reason: str
    channel: NotificationChannel | None = None


@dataclass
class BulkNotificationResult:
    """Aggregate outcome of one dispatch across all recipients."""

    total: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[RecipientError] = field(default_factory=list)
    correlation_id: str | None = None
