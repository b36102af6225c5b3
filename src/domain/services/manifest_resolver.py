"""Resolves the effective channel configuration for a notification."""

from collections.abc import Mapping

import structlog

from core.exceptions import TemplateNotFoundError
from domain.entities.manifest import (
    ChannelManifest,
    NotificationManifest,
    ResolvedChannelConfig,
    derive_template,
    resolve_channels,
)
from domain.entities.notification import NotificationChannel, NotificationType, ProfileType
from domain.manifests.registry import NOTIFICATION_REGISTRY, get_manifest
from domain.repositories.template_store import ITemplateStore

logger = structlog.get_logger()


class ManifestResolver:
    """Turns (manifest, audience, channel, locale) into a concrete config.

    Resolution order for the template: the channel's explicit ``template``,
    then ``template_base`` under the channel's folder. Locale candidates
    are the requested locale, the channel's ``default_locale`` and the
    process default, in that order. WhatsApp templates live at the
    provider and are not looked up locally.
    """

    def __init__(
        self,
        template_store: ITemplateStore | None = None,
        registry: Mapping[NotificationType, NotificationManifest] = NOTIFICATION_REGISTRY,
        default_locale: str = "en",
    ) -> None:
        self._template_store = template_store
        self._registry = registry
        self._default_locale = default_locale

    @property
    def default_locale(self) -> str:
        return self._default_locale

    def get_manifest(self, notification_type: NotificationType | str) -> NotificationManifest:
        return get_manifest(notification_type, self._registry)

    def get_available_audiences(self, manifest: NotificationManifest) -> list[str]:
        return list(manifest.audiences)

    def get_channel_manifest(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
    ) -> ChannelManifest | None:
        audience_manifest = manifest.audiences.get(audience)
        if audience_manifest is None:
            return None
        return audience_manifest.channels.get(channel)

    def template_for(
        self,
        manifest: NotificationManifest,
        channel_manifest: ChannelManifest,
        channel: NotificationChannel,
    ) -> str | None:
        """Explicit template, else one derived from the manifest's template base.

        WhatsApp templates live at the provider, so only an explicit name counts.
        """
        if channel_manifest.template:
            return channel_manifest.template
        if channel == NotificationChannel.WHATSAPP:
            return None
        if manifest.template_base:
            return derive_template(manifest.template_base, channel)
        return None

    def resolve_channel_config(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
        locale: str | None = None,
    ) -> ResolvedChannelConfig | None:
        """Resolve one audience/channel.

        Returns None when the audience or the channel is not declared,
        which means the notification is suppressed for it.
        """
        channel_manifest = self.get_channel_manifest(manifest, audience, channel)
        if channel_manifest is None:
            return None
        return self._resolve(manifest, audience, channel, channel_manifest, locale)

    def resolve_recipient_channels(
        self,
        manifest: NotificationManifest,
        audience: str,
        profile_type: ProfileType | None = None,
        locale: str | None = None,
    ) -> list[ResolvedChannelConfig]:
        """Resolve every channel a recipient of ``audience`` should receive.

        Profile-scoped audiences pick channels by profile type and fall
        back to IN_APP. An IN_APP fallback the audience does not configure
        is derived from the manifest's template base.
        """
        audience_manifest = manifest.audiences.get(audience)
        if audience_manifest is None:
            return []

        configs: list[ResolvedChannelConfig] = []
        for channel in resolve_channels(audience_manifest.channel_selection(), profile_type):
            channel_manifest = audience_manifest.channels.get(channel)
            if channel_manifest is None and channel == NotificationChannel.IN_APP:
                channel_manifest = ChannelManifest()
            if channel_manifest is None:
                logger.warning(
                    "notification_channel_not_configured",
                    notification_type=manifest.type.value,
                    audience=audience,
                    channel=channel.value,
                    profile_type=profile_type.value if profile_type else None,
                )
                continue
            try:
                configs.append(
                    self._resolve(manifest, audience, channel, channel_manifest, locale)
                )
            except TemplateNotFoundError as e:
                logger.warning(
                    "notification_template_unresolvable",
                    notification_type=manifest.type.value,
                    audience=audience,
                    channel=channel.value,
                    error=e.message,
                )
        return configs

    def _resolve(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
        channel_manifest: ChannelManifest,
        locale: str | None,
    ) -> ResolvedChannelConfig:
        requested_locale = locale or channel_manifest.default_locale or self._default_locale

        template = self.template_for(manifest, channel_manifest, channel)
        if template is None and channel == NotificationChannel.WHATSAPP:
            # Resolved without a provider template; the payload builder rejects it.
            logger.warning(
                "notification_whatsapp_template_missing",
                notification_type=manifest.type.value,
                audience=audience,
            )
            template = ""
        if template is None:
            raise TemplateNotFoundError(
                template=f"{manifest.type.value}:{audience}:{channel.value}",
                locale=requested_locale,
                path="no template and no template_base",
            )

        resolved_locale, used_fallback = self._resolve_locale(
            template, channel, requested_locale, channel_manifest.default_locale
        )

        return ResolvedChannelConfig(
            type=manifest.type,
            audience=audience,
            channel=channel,
            template=template,
            locale=resolved_locale,
            requested_locale=requested_locale,
            used_fallback=used_fallback,
            subject=channel_manifest.subject,
            required_variables=channel_manifest.required_variables,
        )

    def _resolve_locale(
        self,
        template: str,
        channel: NotificationChannel,
        requested_locale: str,
        channel_default: str | None,
    ) -> tuple[str, bool]:
        if channel == NotificationChannel.WHATSAPP or self._template_store is None:
            return requested_locale, False

        candidates: list[str] = []
        for candidate in (requested_locale, channel_default, self._default_locale):
            if candidate and candidate not in candidates:
                candidates.append(candidate)

        for candidate in candidates:
            if self._template_store.exists(template, channel, candidate):
                return candidate, candidate != requested_locale

        # Not found anywhere; rendering reports the missing template.
        return requested_locale, False
