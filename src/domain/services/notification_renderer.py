"""Renders channel content from resolved configurations."""

from typing import Any

from domain.entities.manifest import (
    NotificationManifest,
    RenderedNotification,
    ResolvedChannelConfig,
)
from domain.entities.notification import NotificationChannel
from domain.repositories.template_store import ITemplateStore


class NotificationRenderer:
    """Renders templates through the template store.

    WhatsApp messages are provider templates filled with positional
    parameters, so nothing is rendered for them locally.
    """

    def __init__(self, template_store: ITemplateStore) -> None:
        self._template_store = template_store

    def render(
        self,
        manifest: NotificationManifest,
        config: ResolvedChannelConfig,
        template_data: dict[str, Any],
    ) -> RenderedNotification:
        content: str | dict[str, Any] = ""
        if config.channel != NotificationChannel.WHATSAPP:
            content = self._template_store.render(
                config.template, config.channel, config.locale, template_data
            )

        subject = None
        if config.channel == NotificationChannel.EMAIL and config.subject:
            subject = self._template_store.render_string(config.subject, template_data).strip()

        return RenderedNotification(
            type=manifest.type,
            channel=config.channel,
            content=content,
            template=config.template,
            locale=config.locale,
            subject=subject or None,
            used_fallback=config.used_fallback,
            metadata={
                "audience": config.audience,
                "requested_locale": config.requested_locale,
            },
        )
