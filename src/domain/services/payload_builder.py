"""Builds channel-specific payloads from rendered notifications.

Everything here is a pure transformation: no I/O, no clocks, no random
identifiers. Identical inputs always produce equal payloads.
"""

from dataclasses import fields
from typing import Any

import orjson

from domain.entities.manifest import (
    NotificationManifest,
    RenderedNotification,
    ResolvedChannelConfig,
)
from domain.entities.notification import NotificationChannel, ProfileType
from domain.entities.payload import (
    EmailNotificationPayload,
    InAppNotificationPayload,
    NotificationEnvelope,
    NotificationPayload,
    PushNotificationPayload,
    SmsNotificationPayload,
    WhatsAppNotificationPayload,
)

DEFAULT_TITLE = "Notification"


def parameter_text(value: Any) -> str:
    """Coerce a template value into a WhatsApp text parameter."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    try:
        return orjson.dumps(value, default=str).decode()
    except orjson.JSONEncodeError:
        return "[object]"


def _as_mapping(content: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(content, dict):
        return content
    if content:
        return {"message": content}
    return {}


def _envelope_fields(base: NotificationEnvelope) -> dict[str, Any]:
    return {f.name: getattr(base, f.name) for f in fields(NotificationEnvelope)}


class PayloadBuilder:
    """Pure builder for the five channel payload shapes."""

    def build_base_payload(
        self,
        recipient: str,
        channel: NotificationChannel,
        manifest: NotificationManifest,
        locale: str,
        user_id: str,
        correlation_id: str,
        center_id: str | None = None,
        profile_type: ProfileType | None = None,
        profile_id: str | None = None,
    ) -> NotificationEnvelope:
        return NotificationEnvelope(
            recipient=recipient,
            channel=channel,
            type=manifest.type,
            group=manifest.group,
            locale=locale,
            user_id=user_id,
            correlation_id=correlation_id,
            center_id=center_id,
            profile_type=profile_type,
            profile_id=profile_id,
        )

    def build(
        self,
        channel: NotificationChannel,
        base: NotificationEnvelope,
        rendered: RenderedNotification,
        template_data: dict[str, Any],
        manifest: NotificationManifest,
        channel_config: ResolvedChannelConfig | None = None,
    ) -> NotificationPayload | None:
        """Build the payload for ``channel``.

        Returns None when the payload would be invalid: an email without a
        subject, a WhatsApp message without a provider template, or an
        unknown channel. Callers count None as a failed build.
        """
        envelope = _envelope_fields(base)

        if channel == NotificationChannel.EMAIL:
            if not rendered.subject:
                return None
            html = str(rendered.content)
            return EmailNotificationPayload(
                **envelope,
                subject=rendered.subject,
                html=html,
                content=html,
                template=rendered.template,
            )

        if channel == NotificationChannel.SMS:
            return SmsNotificationPayload(
                **envelope,
                content=str(rendered.content),
                template=rendered.template,
            )

        if channel == NotificationChannel.WHATSAPP:
            if channel_config is None or not channel_config.template:
                return None
            # Order must match the placeholders of the approved template.
            parameters = [
                {"type": "text", "text": parameter_text(template_data.get(name))}
                for name in manifest.required_variables
            ]
            return WhatsAppNotificationPayload(
                **envelope,
                template_name=channel_config.template,
                template_language=base.locale,
                template_parameters=parameters,
            )

        if channel == NotificationChannel.IN_APP:
            content = _as_mapping(rendered.content)
            title = content.get("title") or template_data.get("title") or DEFAULT_TITLE
            message = content.get("message") or content.get("content") or ""
            expires_at = content.get("expiresAt")
            return InAppNotificationPayload(
                **envelope,
                title=str(title),
                message=str(message),
                template=rendered.template,
                data={"message": message, **content, "template": rendered.template},
                expires_at=str(expires_at) if expires_at is not None else None,
            )

        if channel == NotificationChannel.PUSH:
            content = _as_mapping(rendered.content)
            title = content.get("title") or template_data.get("title") or DEFAULT_TITLE
            message = content.get("message") or content.get("body") or ""
            data = content.get("data")
            return PushNotificationPayload(
                **envelope,
                title=str(title),
                message=str(message),
                template=rendered.template,
                data=dict(data) if isinstance(data, dict) else None,
            )

        return None
