"""Notification catalog: types, channels, groups, profiles and audiences."""

from enum import StrEnum


class NotificationType(StrEnum):
    """Every kind of notification the platform can emit."""

    # Centers
    CENTER_CREATED = "CENTER_CREATED"
    CENTER_UPDATED = "CENTER_UPDATED"
    CENTER_DELETED = "CENTER_DELETED"
    CENTER_RESTORED = "CENTER_RESTORED"

    # Branches
    BRANCH_CREATED = "BRANCH_CREATED"
    BRANCH_UPDATED = "BRANCH_UPDATED"
    BRANCH_DELETED = "BRANCH_DELETED"
    BRANCH_RESTORED = "BRANCH_RESTORED"

    # Access grants
    CENTER_ACCESS_GRANTED = "CENTER_ACCESS_GRANTED"
    CENTER_ACCESS_REVOKED = "CENTER_ACCESS_REVOKED"
    BRANCH_ACCESS_GRANTED = "BRANCH_ACCESS_GRANTED"
    BRANCH_ACCESS_REVOKED = "BRANCH_ACCESS_REVOKED"

    # Users
    USER_REGISTERED = "USER_REGISTERED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    USER_ACTIVATED = "USER_ACTIVATED"

    # Auth / security
    OTP = "OTP"
    PASSWORD_RESET = "PASSWORD_RESET"
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"
    NEW_DEVICE_LOGIN = "NEW_DEVICE_LOGIN"

    # Roles
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_REVOKED = "ROLE_REVOKED"


class NotificationChannel(StrEnum):
    """Delivery mechanisms."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    WHATSAPP = "WHATSAPP"
    IN_APP = "IN_APP"
    PUSH = "PUSH"


class NotificationGroup(StrEnum):
    """Coarse notification category used for filtering."""

    SECURITY = "SECURITY"
    MANAGEMENT = "MANAGEMENT"
    SYSTEM = "SYSTEM"


class ProfileType(StrEnum):
    """Profile a recipient acts under inside a center."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    TEACHER = "TEACHER"
    PARENT = "PARENT"
    STUDENT = "STUDENT"


class Audiences:
    """Audience identifiers used by manifests.

    Audiences are free-form strings; these are the ones the shipped
    manifests use.
    """

    DEFAULT = "DEFAULT"
    TARGET = "TARGET"
    OWNERS = "OWNERS"
    STAFF = "STAFF"
    ADMIN = "ADMIN"
    ACTOR = "ACTOR"
