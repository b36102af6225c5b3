"""Required template variable checks."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from core.exceptions import MissingTemplateVariablesError
from domain.entities.manifest import NotificationManifest
from domain.entities.notification import NotificationChannel

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class VariableValidationResult:
    valid: bool
    missing: list[str] = field(default_factory=list)


class VariableValidator:
    """Checks template data against the variables a channel needs.

    A channel that declares its own ``required_variables`` is checked
    against exactly that set; otherwise the manifest-level set applies.
    WhatsApp always uses the manifest-level set because its positional
    parameters are built from it. A variable counts as missing when the
    key is absent or its value is None.
    """

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def required_for(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
    ) -> tuple[str, ...]:
        if channel == NotificationChannel.WHATSAPP:
            return manifest.required_variables

        audience_manifest = manifest.audiences.get(audience)
        channel_manifest = audience_manifest.channels.get(channel) if audience_manifest else None
        if channel_manifest is not None and channel_manifest.required_variables is not None:
            return channel_manifest.required_variables
        return manifest.required_variables

    def required_for_audiences(
        self,
        manifest: NotificationManifest,
        audiences: Iterable[str],
    ) -> list[str]:
        """Union of required variables across the targeted audiences, in declaration order."""
        required: list[str] = []
        for audience in audiences:
            audience_manifest = manifest.audiences.get(audience)
            if audience_manifest is None:
                continue
            for channel in audience_manifest.channels:
                for name in self.required_for(manifest, audience, channel):
                    if name not in required:
                        required.append(name)
        return required

    def validate(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
        template_data: Mapping[str, Any],
    ) -> VariableValidationResult:
        missing = [
            name
            for name in self.required_for(manifest, audience, channel)
            if template_data.get(name) is None
        ]
        return VariableValidationResult(valid=not missing, missing=missing)

    def enforce(
        self,
        manifest: NotificationManifest,
        audience: str,
        channel: NotificationChannel,
        template_data: Mapping[str, Any],
    ) -> bool:
        """Gate a single audience/channel.

        Returns False when the channel should be skipped.

        Raises:
            MissingTemplateVariablesError: In strict mode, when variables
                are missing.
        """
        result = self.validate(manifest, audience, channel, template_data)
        if result.valid:
            return True

        if self._strict:
            raise MissingTemplateVariablesError(
                notification_type=manifest.type.value,
                audience=audience,
                channel=channel.value,
                missing=result.missing,
            )

        logger.warning(
            "notification_missing_variables",
            notification_type=manifest.type.value,
            audience=audience,
            channel=channel.value,
            missing=result.missing,
        )
        return False
