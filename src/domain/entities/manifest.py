"""Declarative notification manifests.

A manifest describes how one notification type is delivered: which
audiences receive it, over which channels, with which templates. Manifests
are static data built once at import time and never mutated.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from domain.entities.notification import (
    NotificationChannel,
    NotificationGroup,
    NotificationType,
    ProfileType,
)

# Channel folder inside a locale directory, used when deriving templates
# from a manifest's template base.
TEMPLATE_FOLDERS: Mapping[NotificationChannel, str] = MappingProxyType(
    {
        NotificationChannel.EMAIL: "email",
        NotificationChannel.SMS: "sms",
        NotificationChannel.WHATSAPP: "whatsapp",
        NotificationChannel.IN_APP: "in-app",
        NotificationChannel.PUSH: "push",
    }
)

TEMPLATE_EXTENSIONS: Mapping[NotificationChannel, str] = MappingProxyType(
    {
        NotificationChannel.EMAIL: ".hbs",
        NotificationChannel.SMS: ".txt",
        NotificationChannel.WHATSAPP: ".txt",
        NotificationChannel.IN_APP: ".json",
        NotificationChannel.PUSH: ".txt",
    }
)


def derive_template(template_base: str, channel: NotificationChannel) -> str:
    """Build the conventional template path for a channel from a base name."""
    return f"{TEMPLATE_FOLDERS[channel]}/{template_base}"


# --- Channel selection ---


@dataclass(frozen=True, slots=True)
class FixedChannels:
    """Same channel list for every recipient."""

    channels: tuple[NotificationChannel, ...]

    def resolve(self, profile_type: ProfileType | None = None) -> tuple[NotificationChannel, ...]:
        return self.channels


@dataclass(frozen=True, slots=True)
class ProfileChannels:
    """Channel list chosen by the recipient's profile type.

    Profiles without an entry receive IN_APP only so that a recipient is
    never dropped entirely.
    """

    by_profile: Mapping[ProfileType, tuple[NotificationChannel, ...]]
    fallback: tuple[NotificationChannel, ...] = (NotificationChannel.IN_APP,)

    def resolve(self, profile_type: ProfileType | None = None) -> tuple[NotificationChannel, ...]:
        if profile_type is not None and profile_type in self.by_profile:
            return self.by_profile[profile_type]
        return self.fallback


ChannelSelection = FixedChannels | ProfileChannels


def resolve_channels(
    selection: ChannelSelection, profile_type: ProfileType | None = None
) -> tuple[NotificationChannel, ...]:
    """Resolve a channel selection for a recipient profile."""
    return selection.resolve(profile_type)


# --- Manifests ---


@dataclass(frozen=True, slots=True)
class ChannelManifest:
    """Per-channel delivery settings for one audience.

    ``template`` is a template path for rendered channels and the
    pre-approved provider template name for WhatsApp. ``subject`` only
    applies to EMAIL.
    """

    template: str | None = None
    subject: str | None = None
    required_variables: tuple[str, ...] | None = None
    default_locale: str | None = None


@dataclass(frozen=True, slots=True)
class AudienceManifest:
    """Channels one audience receives, with an optional profile-based selection."""

    channels: Mapping[NotificationChannel, ChannelManifest]
    selection: ChannelSelection | None = None

    def channel_selection(self) -> ChannelSelection:
        if self.selection is not None:
            return self.selection
        return FixedChannels(tuple(self.channels))


@dataclass(frozen=True, slots=True)
class NotificationManifest:
    """Declarative delivery contract for one notification type."""

    type: NotificationType
    group: NotificationGroup
    priority: int
    audiences: Mapping[str, AudienceManifest]
    required_variables: tuple[str, ...] = ()
    requires_audit: bool = False
    template_base: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.priority <= 10:
            raise ValueError(f"{self.type}: priority must be between 1 and 10")
        object.__setattr__(self, "audiences", MappingProxyType(dict(self.audiences)))

    def channels_used(self) -> set[NotificationChannel]:
        """Every channel any audience declares."""
        return {channel for audience in self.audiences.values() for channel in audience.channels}


def manifest(
    type: NotificationType,
    group: NotificationGroup,
    priority: int,
    audiences: dict[str, AudienceManifest],
    required_variables: tuple[str, ...] = (),
    requires_audit: bool = False,
    template_base: str | None = None,
    description: str | None = None,
) -> NotificationManifest:
    """Shorthand used by the manifest data modules."""
    return NotificationManifest(
        type=type,
        group=group,
        priority=priority,
        audiences=audiences,
        required_variables=required_variables,
        requires_audit=requires_audit,
        template_base=template_base,
        description=description,
    )


def audience(
    channels: dict[NotificationChannel, ChannelManifest],
    selection: ChannelSelection | None = None,
) -> AudienceManifest:
    return AudienceManifest(channels=MappingProxyType(dict(channels)), selection=selection)


# --- Resolution output ---


@dataclass(frozen=True, slots=True)
class ResolvedChannelConfig:
    """Effective configuration for one (type, audience, channel, locale)."""

    type: NotificationType
    audience: str
    channel: NotificationChannel
    template: str
    locale: str
    requested_locale: str
    used_fallback: bool
    subject: str | None = None
    required_variables: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class RenderedNotification:
    """Content produced by the renderer for one channel."""

    type: NotificationType
    channel: NotificationChannel
    content: str | dict[str, Any]
    template: str
    locale: str
    subject: str | None = None
    used_fallback: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
