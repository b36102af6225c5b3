"""Domain event identifiers published by the platform.

Format: {entity}.{action}
"""

from enum import StrEnum


class CenterEvents(StrEnum):
    CREATED = "center.created"
    UPDATED = "center.updated"
    DELETED = "center.deleted"
    RESTORED = "center.restored"
    EXPORTED = "center.exported"


class BranchEvents(StrEnum):
    CREATED = "branch.created"
    UPDATED = "branch.updated"
    DELETED = "branch.deleted"
    RESTORED = "branch.restored"


class AccessEvents(StrEnum):
    CENTER_ACCESS_GRANTED = "access.center.granted"
    CENTER_ACCESS_REVOKED = "access.center.revoked"
    BRANCH_ACCESS_GRANTED = "access.branch.granted"
    BRANCH_ACCESS_REVOKED = "access.branch.revoked"


class UserEvents(StrEnum):
    CREATED = "user.created"
    UPDATED = "user.updated"
    DELETED = "user.deleted"
    ACTIVATED = "user.activated"
    PROFILE_VIEWED = "user.profile.viewed"


class AuthEvents(StrEnum):
    OTP_REQUESTED = "auth.otp.requested"
    PASSWORD_RESET_REQUESTED = "auth.password.reset.requested"
    PASSWORD_CHANGED = "auth.password.changed"
    EMAIL_VERIFICATION_REQUESTED = "auth.email.verification.requested"
    NEW_DEVICE_LOGIN = "auth.login.new_device"
    LOGIN_FAILED = "auth.login.failed"


class RoleEvents(StrEnum):
    ASSIGNED = "role.assigned"
    REVOKED = "role.revoked"
    PERMISSIONS_REMOVED = "role.permissions.removed"


class SystemEvents(StrEnum):
    HEALTH_FAILURE = "system.health.failure"
    CACHE_CLEARED = "system.cache.cleared"


ALL_EVENT_ENUMS: tuple[type[StrEnum], ...] = (
    CenterEvents,
    BranchEvents,
    AccessEvents,
    UserEvents,
    AuthEvents,
    RoleEvents,
    SystemEvents,
)


def all_event_ids() -> list[str]:
    """Every event identifier the platform publishes."""
    return [member.value for enum_cls in ALL_EVENT_ENUMS for member in enum_cls]
