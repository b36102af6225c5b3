"""Field extraction from domain event payloads.

Publishers do not agree on payload shapes, so each extractor tries several
known field names and dotted paths before giving up with None.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from domain.entities.dispatch import ProfileInfo, RecipientInfo
from domain.entities.notification import ProfileType

USER_ID_PATHS = ("targetUserId", "userId", "user_id", "recipientId", "user.id", "target.id")
EMAIL_PATHS = ("email", "recipient.email", "user.email", "target.email", "contact.email")
PHONE_PATHS = (
    "phone",
    "phoneNumber",
    "recipient.phone",
    "user.phone",
    "user.phoneNumber",
    "target.phone",
    "contact.phone",
)
CENTER_ID_PATHS = ("centerId", "center_id", "center.id", "branch.centerId", "branch.center_id")
PROFILE_TYPE_PATHS = ("profileType", "profile_type", "profile.type", "profile.profileType")
PROFILE_ID_PATHS = ("profileId", "profile_id", "profile.id")
LOCALE_PATHS = ("locale", "lang", "user.locale", "recipient.locale", "target.locale")


def lookup(payload: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path through nested mappings, returning None on any miss."""
    current: Any = payload
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def first_value(payload: Mapping[str, Any], paths: Sequence[str]) -> str | None:
    """First non-empty scalar found at any of ``paths``, as a string."""
    for path in paths:
        value = lookup(payload, path)
        if value is None or isinstance(value, (Mapping, list, tuple)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def extract_user_id(payload: Mapping[str, Any]) -> str | None:
    return first_value(payload, USER_ID_PATHS)


def extract_center_id(payload: Mapping[str, Any]) -> str | None:
    return first_value(payload, CENTER_ID_PATHS)


def extract_locale(payload: Mapping[str, Any]) -> str | None:
    return first_value(payload, LOCALE_PATHS)


def extract_profile_info(payload: Mapping[str, Any]) -> ProfileInfo:
    """Profile type and id; an unknown profile type is treated as absent."""
    raw_type = first_value(payload, PROFILE_TYPE_PATHS)
    profile_type = None
    if raw_type is not None:
        try:
            profile_type = ProfileType(raw_type.upper())
        except ValueError:
            profile_type = None
    return ProfileInfo(
        profile_type=profile_type,
        profile_id=first_value(payload, PROFILE_ID_PATHS),
    )


def extract_recipient(
    payload: Mapping[str, Any],
    audience: str,
    template_data: dict[str, Any] | None = None,
) -> RecipientInfo | None:
    """Build the single recipient an event addresses, or None if it names nobody."""
    user_id = extract_user_id(payload)
    if user_id is None:
        return None

    profile = extract_profile_info(payload)
    return RecipientInfo(
        user_id=user_id,
        audience=audience,
        email=first_value(payload, EMAIL_PATHS),
        phone=first_value(payload, PHONE_PATHS),
        locale=extract_locale(payload),
        center_id=extract_center_id(payload),
        profile_type=profile.profile_type,
        profile_id=profile.profile_id,
        template_data=dict(template_data or {}),
    )
