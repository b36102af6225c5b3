"""Channel-specific notification payloads handed to senders."""

from dataclasses import asdict, dataclass, field
from typing import Any

from domain.entities.notification import (
    NotificationChannel,
    NotificationGroup,
    NotificationType,
    ProfileType,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationEnvelope:
    """Fields shared by every channel payload."""

    recipient: str
    channel: NotificationChannel
    type: NotificationType
    group: NotificationGroup
    locale: str
    user_id: str
    correlation_id: str
    center_id: str | None = None
    profile_type: ProfileType | None = None
    profile_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailNotificationPayload(NotificationEnvelope):
    subject: str
    html: str
    content: str
    template: str


@dataclass(frozen=True, slots=True, kw_only=True)
class SmsNotificationPayload(NotificationEnvelope):
    content: str
    template: str


@dataclass(frozen=True, slots=True, kw_only=True)
class WhatsAppNotificationPayload(NotificationEnvelope):
    """Provider template message: name plus positional text parameters."""

    template_name: str
    template_language: str
    template_parameters: list[dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class InAppNotificationPayload(NotificationEnvelope):
    title: str
    message: str
    template: str
    data: dict[str, Any] = field(default_factory=dict)
    expires_at: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PushNotificationPayload(NotificationEnvelope):
    title: str
    message: str
    template: str
    data: dict[str, Any] | None = None


NotificationPayload = (
    EmailNotificationPayload
    | SmsNotificationPayload
    | WhatsAppNotificationPayload
    | InAppNotificationPayload
    | PushNotificationPayload
)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome reported by a sender for one payload."""

    success: bool
    channel: NotificationChannel
    message_id: str | None = None
    error: str | None = None
