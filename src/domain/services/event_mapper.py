"""Maps domain events to notification types."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from domain.entities.events import (
    AccessEvents,
    AuthEvents,
    BranchEvents,
    CenterEvents,
    RoleEvents,
    UserEvents,
)
from domain.entities.notification import NotificationType

# Events absent from this map intentionally produce no notification.
EVENT_NOTIFICATION_MAP: Mapping[str, NotificationType] = MappingProxyType(
    {
        CenterEvents.CREATED: NotificationType.CENTER_CREATED,
        CenterEvents.UPDATED: NotificationType.CENTER_UPDATED,
        CenterEvents.DELETED: NotificationType.CENTER_DELETED,
        CenterEvents.RESTORED: NotificationType.CENTER_RESTORED,
        BranchEvents.CREATED: NotificationType.BRANCH_CREATED,
        BranchEvents.UPDATED: NotificationType.BRANCH_UPDATED,
        BranchEvents.DELETED: NotificationType.BRANCH_DELETED,
        BranchEvents.RESTORED: NotificationType.BRANCH_RESTORED,
        AccessEvents.CENTER_ACCESS_GRANTED: NotificationType.CENTER_ACCESS_GRANTED,
        AccessEvents.CENTER_ACCESS_REVOKED: NotificationType.CENTER_ACCESS_REVOKED,
        AccessEvents.BRANCH_ACCESS_GRANTED: NotificationType.BRANCH_ACCESS_GRANTED,
        AccessEvents.BRANCH_ACCESS_REVOKED: NotificationType.BRANCH_ACCESS_REVOKED,
        UserEvents.CREATED: NotificationType.USER_REGISTERED,
        UserEvents.UPDATED: NotificationType.USER_UPDATED,
        UserEvents.DELETED: NotificationType.USER_DELETED,
        UserEvents.ACTIVATED: NotificationType.USER_ACTIVATED,
        AuthEvents.OTP_REQUESTED: NotificationType.OTP,
        AuthEvents.PASSWORD_RESET_REQUESTED: NotificationType.PASSWORD_RESET,
        AuthEvents.PASSWORD_CHANGED: NotificationType.PASSWORD_CHANGED,
        AuthEvents.EMAIL_VERIFICATION_REQUESTED: NotificationType.EMAIL_VERIFICATION,
        AuthEvents.NEW_DEVICE_LOGIN: NotificationType.NEW_DEVICE_LOGIN,
        RoleEvents.ASSIGNED: NotificationType.ROLE_ASSIGNED,
        RoleEvents.REVOKED: NotificationType.ROLE_REVOKED,
    }
)

_SECURITY_KEYWORDS = ("AUTH", "SECURITY", "PASSWORD", "OTP", "VERIFICATION")
_DELETION_KEYWORDS = ("DELETE", "REMOVE")
_SYSTEM_KEYWORDS = ("SYSTEM", "CRITICAL", "FAILURE", "ERROR")


@dataclass(frozen=True, slots=True)
class UnmappedEventSeverity:
    """Log level for an event with no notification mapping.

    ``priority`` follows the dashboard scale: 0-1 info, 4-5 warning,
    6-7 error.
    """

    log_level: str
    priority: int


def map_event(
    event_id: str,
    mapping: Mapping[str, NotificationType] = EVENT_NOTIFICATION_MAP,
) -> NotificationType | None:
    """Return the notification type for an event, or None when unmapped."""
    return mapping.get(event_id)


def unmapped_event_log_level(event_id: str) -> UnmappedEventSeverity:
    """Pick a log severity for an unmapped event from keywords in its name.

    Security keywords are checked first, then deletions, then system
    failures.
    """
    name = event_id.upper()
    if any(keyword in name for keyword in _SECURITY_KEYWORDS):
        return UnmappedEventSeverity("warn", 4)
    if any(keyword in name for keyword in _DELETION_KEYWORDS):
        return UnmappedEventSeverity("warn", 4)
    if any(keyword in name for keyword in _SYSTEM_KEYWORDS):
        return UnmappedEventSeverity("error", 6)
    return UnmappedEventSeverity("info", 0)
