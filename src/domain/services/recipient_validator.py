"""Recipient address validation per channel."""

import re

from core.exceptions import InvalidRecipientError
from domain.entities.dispatch import RecipientInfo
from domain.entities.notification import NotificationChannel

# Simplified RFC 5322: local@domain with dot-separated labels.
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
_PHONE_NOISE = re.compile(r"[\s\-()]")
_TEN_DIGITS = re.compile(r"^\d{10}$")


def is_valid_email(email: str | None) -> bool:
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.match(email.strip()) is not None


def is_valid_e164(phone: str | None) -> bool:
    if not phone or not isinstance(phone, str):
        return False
    return E164_PATTERN.match(phone.strip()) is not None


def normalize_phone(phone: str | None) -> str | None:
    """Best-effort conversion to E.164.

    Handles ``00`` international prefixes and bare ten-digit numbers
    (assumed +1). Local numbers with a leading ``0`` need a country code
    and return None.
    """
    if not phone or not isinstance(phone, str):
        return None

    normalized = _PHONE_NOISE.sub("", phone)
    if is_valid_e164(normalized):
        return normalized

    if normalized.startswith("00"):
        normalized = "+" + normalized[2:]
        if is_valid_e164(normalized):
            return normalized

    if normalized.startswith("0"):
        return None

    if not normalized.startswith("+") and _TEN_DIGITS.match(normalized):
        normalized = "+1" + normalized
        if is_valid_e164(normalized):
            return normalized

    return None


def is_valid_recipient_for_channel(recipient: str | None, channel: NotificationChannel) -> bool:
    if not recipient:
        return False
    if channel == NotificationChannel.EMAIL:
        return is_valid_email(recipient)
    if channel in (NotificationChannel.SMS, NotificationChannel.WHATSAPP):
        return is_valid_e164(recipient)
    # IN_APP and PUSH are addressed by user id.
    return True


def has_address(recipient: RecipientInfo, channel: NotificationChannel) -> bool:
    """Whether the recipient carries any contact field for the channel."""
    if channel == NotificationChannel.EMAIL:
        return bool(recipient.email and recipient.email.strip())
    if channel in (NotificationChannel.SMS, NotificationChannel.WHATSAPP):
        return bool(recipient.phone and recipient.phone.strip())
    return bool(recipient.user_id)


def recipient_address(recipient: RecipientInfo, channel: NotificationChannel) -> str:
    """Pick and validate the address a channel delivers to.

    Raises:
        InvalidRecipientError: If the address is missing or malformed.
    """
    if channel == NotificationChannel.EMAIL:
        email = recipient.email.strip() if recipient.email else None
        if not is_valid_email(email):
            raise InvalidRecipientError(channel.value, recipient.email)
        return email  # type: ignore[return-value]

    if channel in (NotificationChannel.SMS, NotificationChannel.WHATSAPP):
        phone = normalize_phone(recipient.phone)
        if phone is None:
            raise InvalidRecipientError(channel.value, recipient.phone)
        return phone

    if not recipient.user_id:
        raise InvalidRecipientError(channel.value, recipient.user_id)
    return recipient.user_id
