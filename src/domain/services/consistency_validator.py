"""Startup check that manifests, event mappings and templates agree."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

from core.exceptions import ManifestValidationError
from domain.entities.manifest import NotificationManifest, ProfileChannels
from domain.entities.notification import NotificationChannel, NotificationType
from domain.manifests.registry import NOTIFICATION_REGISTRY
from domain.repositories.template_store import ITemplateStore
from domain.services.event_mapper import EVENT_NOTIFICATION_MAP
from domain.services.manifest_resolver import ManifestResolver

logger = structlog.get_logger()

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ManifestIssue:
    """One inconsistency between a manifest and its surroundings."""

    message: str
    severity: str = SEVERITY_ERROR
    notification_type: str | None = None
    audience: str | None = None
    channel: str | None = None
    locale: str | None = None
    template_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationReport:
    checked_types: int = 0
    issues: list[ManifestIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ManifestIssue]:
        return [i for i in self.issues if i.severity == SEVERITY_ERROR]

    @property
    def warnings(self) -> list[ManifestIssue]:
        return [i for i in self.issues if i.severity == SEVERITY_WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors


class ManifestConsistencyValidator:
    """Collects every manifest problem before deciding pass or fail.

    Errors: catalog types without a manifest, mapped events pointing at a
    missing manifest, EMAIL channels without a subject, WhatsApp channels
    without a provider template, channels with no resolvable template,
    templates missing in the default locale, and channel variables that
    the manifest-level list does not declare.

    Warnings: templates missing in other supported locales and profile
    selections naming channels the audience does not configure.

    In strict mode any error raises ManifestValidationError; otherwise
    every issue is logged and startup continues.
    """

    def __init__(
        self,
        template_store: ITemplateStore,
        registry: Mapping[NotificationType, NotificationManifest] = NOTIFICATION_REGISTRY,
        event_map: Mapping[str, NotificationType] = EVENT_NOTIFICATION_MAP,
        catalog: Iterable[NotificationType] = NotificationType,
        default_locale: str = "en",
        supported_locales: Sequence[str] = ("en",),
        strict: bool = False,
    ) -> None:
        self._template_store = template_store
        self._registry = registry
        self._event_map = event_map
        self._catalog = list(catalog)
        self._default_locale = default_locale
        self._supported_locales = list(supported_locales)
        self._strict = strict
        self._resolver = ManifestResolver(
            template_store=template_store,
            registry=registry,
            default_locale=default_locale,
        )

    @property
    def strict(self) -> bool:
        return self._strict

    def collect(self) -> ValidationReport:
        """Run every check without raising or logging."""
        report = ValidationReport(checked_types=len(self._registry))

        for notification_type in self._catalog:
            if notification_type not in self._registry:
                report.issues.append(
                    ManifestIssue(
                        message=f"No manifest registered for {notification_type.value}",
                        notification_type=notification_type.value,
                    )
                )

        for event_id, notification_type in self._event_map.items():
            if notification_type not in self._registry:
                report.issues.append(
                    ManifestIssue(
                        message=(
                            f"Event {event_id} maps to {notification_type.value}, "
                            "which has no manifest"
                        ),
                        notification_type=notification_type.value,
                    )
                )

        for manifest in self._registry.values():
            report.issues.extend(self._check_manifest(manifest))

        return report

    def validate(self) -> ValidationReport:
        """Collect, log and, in strict mode, fail on errors.

        Raises:
            ManifestValidationError: In strict mode when any error was found.
        """
        report = self.collect()

        for issue in report.issues:
            logger.warning("notification_manifest_issue", **issue.to_dict())

        if report.errors and self._strict:
            raise ManifestValidationError([issue.to_dict() for issue in report.errors])

        if report.issues:
            logger.warning(
                "notification_manifest_validation_degraded",
                errors=len(report.errors),
                warnings=len(report.warnings),
            )
        else:
            logger.info(
                "notification_manifest_validation_passed",
                checked_types=report.checked_types,
            )
        return report

    def _check_manifest(self, manifest: NotificationManifest) -> list[ManifestIssue]:
        issues: list[ManifestIssue] = []
        type_name = manifest.type.value
        declared = set(manifest.required_variables)

        for audience, audience_manifest in manifest.audiences.items():
            for channel, channel_manifest in audience_manifest.channels.items():
                context = {
                    "notification_type": type_name,
                    "audience": audience,
                    "channel": channel.value,
                }

                extra = [
                    name
                    for name in channel_manifest.required_variables or ()
                    if name not in declared
                ]
                if extra:
                    issues.append(
                        ManifestIssue(
                            message=(
                                "Channel requires variables the manifest does not "
                                f"declare: {', '.join(extra)}"
                            ),
                            **context,
                        )
                    )

                if channel == NotificationChannel.EMAIL and not channel_manifest.subject:
                    issues.append(ManifestIssue(message="EMAIL channel has no subject", **context))

                if channel == NotificationChannel.WHATSAPP:
                    if not channel_manifest.template:
                        issues.append(
                            ManifestIssue(
                                message="WHATSAPP channel has no provider template name",
                                **context,
                            )
                        )
                    continue

                template = self._resolver.template_for(manifest, channel_manifest, channel)
                if template is None:
                    issues.append(
                        ManifestIssue(
                            message="Channel has no template and manifest has no template_base",
                            **context,
                        )
                    )
                    continue

                issues.extend(
                    self._check_locales(
                        template,
                        channel,
                        channel_manifest.default_locale or self._default_locale,
                        context,
                    )
                )

            selection = audience_manifest.selection
            if isinstance(selection, ProfileChannels):
                for profile_type, channels in selection.by_profile.items():
                    for channel in channels:
                        if channel in audience_manifest.channels:
                            continue
                        if channel == NotificationChannel.IN_APP and manifest.template_base:
                            continue
                        issues.append(
                            ManifestIssue(
                                message=(
                                    f"Profile {profile_type.value} selects {channel.value}, "
                                    "which the audience does not configure"
                                ),
                                severity=SEVERITY_WARNING,
                                notification_type=type_name,
                                audience=audience,
                                channel=channel.value,
                            )
                        )

        return issues

    def _check_locales(
        self,
        template: str,
        channel: NotificationChannel,
        default_locale: str,
        context: dict[str, str],
    ) -> list[ManifestIssue]:
        issues: list[ManifestIssue] = []
        locales = [default_locale] + [
            locale for locale in self._supported_locales if locale != default_locale
        ]
        for locale in locales:
            if self._template_store.exists(template, channel, locale):
                continue
            path = self._template_store.path_for(template, channel, locale)
            is_default = locale == default_locale
            issues.append(
                ManifestIssue(
                    message=(
                        f"Template missing for {'default ' if is_default else ''}"
                        f"locale {locale}: {path}"
                    ),
                    severity=SEVERITY_ERROR if is_default else SEVERITY_WARNING,
                    locale=locale,
                    template_path=path,
                    **context,
                )
            )
        return issues
