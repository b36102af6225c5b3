"""Notification dispatch: from a domain event to sent channel payloads."""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import structlog

from core.exceptions import (
    AppException,
    AudienceNotSupportedError,
    ChannelNotSupportedError,
    InvalidRecipientError,
    MissingTemplateVariablesError,
    PayloadBuildError,
)
from domain.entities.dispatch import BulkNotificationResult, RecipientError, RecipientInfo
from domain.entities.manifest import (
    NotificationManifest,
    RenderedNotification,
    ResolvedChannelConfig,
)
from domain.entities.notification import NotificationChannel, NotificationType, ProfileType
from domain.entities.notification_log import DeliveryStatus, NotificationLog
from domain.entities.payload import NotificationPayload
from domain.repositories.notification_sender import INotificationSender
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_mapper import (
    EVENT_NOTIFICATION_MAP,
    map_event,
    unmapped_event_log_level,
)
from domain.services.extractors import extract_recipient
from domain.services.manifest_resolver import ManifestResolver
from domain.services.notification_renderer import NotificationRenderer
from domain.services.payload_builder import PayloadBuilder
from domain.services.recipient_validator import has_address, recipient_address
from domain.services.variable_validator import VariableValidator

logger = structlog.get_logger()

DEFAULT_CONCURRENCY_LIMIT = 20
DEFAULT_BULK_LOG_THRESHOLD = 10


def current_correlation_id() -> str:
    """Reuse the request ID bound by the HTTP middleware, else start a new one."""
    bound = structlog.contextvars.get_contextvars()
    return str(bound.get("correlation_id") or bound.get("request_id") or uuid4())


@dataclass(frozen=True, slots=True)
class NotificationPreview:
    config: ResolvedChannelConfig
    rendered: RenderedNotification
    payload: NotificationPayload


@dataclass
class _RecipientOutcome:
    sent: int = 0
    failed: int = 0
    errors: list[RecipientError] = field(default_factory=list)
    logs: list[NotificationLog] = field(default_factory=list)

    @property
    def status(self) -> DeliveryStatus:
        # Any failed channel makes the recipient failed.
        if self.failed:
            return DeliveryStatus.FAILED
        if self.sent:
            return DeliveryStatus.SENT
        return DeliveryStatus.SKIPPED


class NotificationService:
    """Fans a notification out to recipients and channels.

    Each recipient is processed in isolation under a concurrency limit;
    one recipient's failure never affects another's. Nothing raised while
    delivering reaches the publisher of the event: failures are folded
    into the returned BulkNotificationResult.
    """

    def __init__(
        self,
        resolver: ManifestResolver,
        renderer: NotificationRenderer,
        sender: INotificationSender,
        variable_validator: VariableValidator,
        payload_builder: PayloadBuilder | None = None,
        uow_factory: Callable[[], IUnitOfWork] | None = None,
        event_map: Mapping[str, NotificationType] = EVENT_NOTIFICATION_MAP,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        bulk_log_threshold: int = DEFAULT_BULK_LOG_THRESHOLD,
    ) -> None:
        self._resolver = resolver
        self._renderer = renderer
        self._sender = sender
        self._variables = variable_validator
        self._builder = payload_builder or PayloadBuilder()
        self._uow_factory = uow_factory
        self._event_map = event_map
        self._concurrency_limit = concurrency_limit
        self._bulk_log_threshold = bulk_log_threshold

    async def dispatch(
        self,
        event_id: str,
        payload: dict[str, Any],
        recipients: list[RecipientInfo] | None = None,
    ) -> BulkNotificationResult:
        """Handle a domain event.

        Unmapped events are logged at a severity derived from the event
        name and produce an empty result.
        """
        correlation_id = current_correlation_id()
        notification_type = map_event(event_id, self._event_map)

        if notification_type is None:
            severity = unmapped_event_log_level(event_id)
            log = {
                "warn": logger.warning,
                "error": logger.error,
            }.get(severity.log_level, logger.info)
            log(
                "notification_event_unmapped",
                event_id=event_id,
                priority=severity.priority,
                correlation_id=correlation_id,
            )
            return BulkNotificationResult(correlation_id=correlation_id)

        return await self.send(
            notification_type,
            payload,
            recipients=recipients,
            correlation_id=correlation_id,
        )

    async def send(
        self,
        notification_type: NotificationType,
        payload: dict[str, Any],
        recipients: list[RecipientInfo] | None = None,
        correlation_id: str | None = None,
    ) -> BulkNotificationResult:
        """Deliver a notification type to explicit or extracted recipients.

        Args:
            notification_type: The notification to send.
            payload: Event payload. Its fields (and a nested ``templateData``
                mapping, if present) become template variables.
            recipients: Explicit recipients. When omitted, a single
                recipient is extracted from the payload.
            correlation_id: Identifier threading this dispatch through logs.
        """
        correlation_id = correlation_id or current_correlation_id()
        manifest = self._resolver.get_manifest(notification_type)
        template_data = self._template_data(payload)

        if recipients is None:
            recipients = self._recipients_from_payload(manifest, payload)
        recipients = self._dedupe(recipients)

        result = BulkNotificationResult(total=len(recipients), correlation_id=correlation_id)

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            notification_type=notification_type.value,
        ):
            if not recipients:
                logger.info("notification_no_recipients")
                return result

            is_bulk = len(recipients) > self._bulk_log_threshold
            if is_bulk:
                logger.info("notification_dispatch_started", total=len(recipients))

            semaphore = asyncio.Semaphore(self._concurrency_limit)

            async def run(recipient: RecipientInfo) -> _RecipientOutcome:
                async with semaphore:
                    return await self._process_recipient(
                        manifest, recipient, template_data, correlation_id
                    )

            outcomes = await asyncio.gather(*(run(r) for r in recipients))

            logs: list[NotificationLog] = []
            for outcome in outcomes:
                status = outcome.status
                if status == DeliveryStatus.SENT:
                    result.sent += 1
                elif status == DeliveryStatus.FAILED:
                    result.failed += 1
                else:
                    result.skipped += 1
                result.errors.extend(outcome.errors)
                logs.extend(outcome.logs)

            await self._persist_logs(logs)

            if is_bulk or result.failed:
                logger.info(
                    "notification_dispatch_completed",
                    total=result.total,
                    sent=result.sent,
                    failed=result.failed,
                    skipped=result.skipped,
                )

        return result

    # --- Preview (no delivery) ---

    def preview(
        self,
        notification_type: NotificationType,
        audience: str,
        channel: NotificationChannel,
        template_data: dict[str, Any],
        locale: str | None = None,
        recipient: str | None = None,
        user_id: str = "preview",
        center_id: str | None = None,
        profile_type: ProfileType | None = None,
    ) -> NotificationPreview:
        """Resolve, validate, render and build one channel without sending.

        Raises:
            AudienceNotSupportedError: The manifest has no such audience.
            ChannelNotSupportedError: The audience does not use the channel.
            MissingTemplateVariablesError: Required variables are missing.
            PayloadBuildError: The builder rejected the rendered content.
        """
        manifest = self._resolver.get_manifest(notification_type)
        if audience not in manifest.audiences:
            raise AudienceNotSupportedError(manifest.type.value, audience)

        config = self._resolver.resolve_channel_config(manifest, audience, channel, locale)
        if config is None:
            raise ChannelNotSupportedError(manifest.type.value, audience, channel.value)

        validation = self._variables.validate(manifest, audience, channel, template_data)
        if not validation.valid:
            raise MissingTemplateVariablesError(
                notification_type=manifest.type.value,
                audience=audience,
                channel=channel.value,
                missing=validation.missing,
            )

        rendered = self._renderer.render(manifest, config, template_data)
        base = self._builder.build_base_payload(
            recipient=recipient or user_id,
            channel=channel,
            manifest=manifest,
            locale=config.locale,
            user_id=user_id,
            correlation_id=current_correlation_id(),
            center_id=center_id,
            profile_type=profile_type,
        )
        payload = self._builder.build(channel, base, rendered, template_data, manifest, config)
        if payload is None:
            raise PayloadBuildError(manifest.type.value, channel.value, "builder returned no payload")
        return NotificationPreview(config=config, rendered=rendered, payload=payload)

    # --- Delivery log reads (use own UoW context) ---

    async def get_delivery_logs(self, correlation_id: str) -> list[NotificationLog]:
        """Get the delivery log of one dispatch."""
        if self._uow_factory is None:
            return []
        async with self._uow_factory() as uow:
            return await uow.notification_logs.list_by_correlation_id(correlation_id)

    async def get_recent_delivery_logs(
        self,
        limit: int = 50,
        notification_type: str | None = None,
    ) -> list[NotificationLog]:
        """Get the newest delivery log rows."""
        if self._uow_factory is None:
            return []
        async with self._uow_factory() as uow:
            return await uow.notification_logs.list_recent(
                limit=limit, notification_type=notification_type
            )

    async def _process_recipient(
        self,
        manifest: NotificationManifest,
        recipient: RecipientInfo,
        template_data: dict[str, Any],
        correlation_id: str,
    ) -> _RecipientOutcome:
        outcome = _RecipientOutcome()
        data = {**template_data, **recipient.template_data}

        try:
            configs = self._resolver.resolve_recipient_channels(
                manifest,
                recipient.audience,
                profile_type=recipient.profile_type,
                locale=recipient.locale,
            )
        except Exception as e:
            logger.exception("notification_channel_resolution_failed", user_id=recipient.user_id)
            outcome.failed += 1
            outcome.errors.append(RecipientError(recipient_id=recipient.user_id, reason=str(e)))
            return outcome

        for config in configs:
            await self._deliver(manifest, recipient, config, data, correlation_id, outcome)
        return outcome

    async def _deliver(
        self,
        manifest: NotificationManifest,
        recipient: RecipientInfo,
        config: ResolvedChannelConfig,
        data: dict[str, Any],
        correlation_id: str,
        outcome: _RecipientOutcome,
    ) -> None:
        channel = config.channel

        def record(status: DeliveryStatus, address: str | None = None, error: str | None = None) -> None:
            if status == DeliveryStatus.SENT:
                outcome.sent += 1
            elif status == DeliveryStatus.FAILED:
                outcome.failed += 1
                outcome.errors.append(
                    RecipientError(
                        recipient_id=recipient.user_id,
                        channel=channel,
                        reason=error or "unknown error",
                    )
                )
            outcome.logs.append(
                NotificationLog(
                    correlation_id=correlation_id,
                    notification_type=manifest.type.value,
                    channel=channel.value,
                    audience=recipient.audience,
                    user_id=recipient.user_id,
                    status=status,
                    recipient=address,
                    center_id=recipient.center_id,
                    error=error,
                    template=config.template,
                    locale=config.locale,
                    requires_audit=manifest.requires_audit,
                    metadata={
                        "priority": manifest.priority,
                        "group": manifest.group.value,
                        "used_fallback": config.used_fallback,
                    },
                )
            )

        address: str | None = None
        try:
            if not self._variables.enforce(manifest, recipient.audience, channel, data):
                record(DeliveryStatus.SKIPPED, error="missing template variables")
                return

            if not has_address(recipient, channel):
                logger.debug(
                    "notification_recipient_no_address",
                    user_id=recipient.user_id,
                    channel=channel.value,
                )
                record(DeliveryStatus.SKIPPED, error="no address for channel")
                return

            address = recipient_address(recipient, channel)
            rendered = self._renderer.render(manifest, config, data)
            base = self._builder.build_base_payload(
                recipient=address,
                channel=channel,
                manifest=manifest,
                locale=config.locale,
                user_id=recipient.user_id,
                correlation_id=correlation_id,
                center_id=recipient.center_id,
                profile_type=recipient.profile_type,
                profile_id=recipient.profile_id,
            )
            payload = self._builder.build(channel, base, rendered, data, manifest, config)
            if payload is None:
                logger.warning(
                    "notification_payload_build_failed",
                    user_id=recipient.user_id,
                    channel=channel.value,
                )
                record(DeliveryStatus.FAILED, address, "payload build failed")
                return

            delivery = await self._sender.send(payload)
            if delivery.success:
                record(DeliveryStatus.SENT, address)
            else:
                logger.warning(
                    "notification_delivery_rejected",
                    user_id=recipient.user_id,
                    channel=channel.value,
                    error=delivery.error,
                )
                record(DeliveryStatus.FAILED, address, delivery.error or "delivery failed")
        except InvalidRecipientError as e:
            logger.warning(
                "notification_recipient_invalid",
                user_id=recipient.user_id,
                channel=channel.value,
            )
            record(DeliveryStatus.FAILED, address, e.message)
        except AppException as e:
            logger.warning(
                "notification_delivery_failed",
                user_id=recipient.user_id,
                channel=channel.value,
                error_code=e.error_code.value,
                error=e.message,
            )
            record(DeliveryStatus.FAILED, address, e.message)
        except Exception as e:
            logger.exception(
                "notification_delivery_failed",
                user_id=recipient.user_id,
                channel=channel.value,
            )
            record(DeliveryStatus.FAILED, address, str(e))

    async def _persist_logs(self, logs: list[NotificationLog]) -> None:
        if not logs or self._uow_factory is None:
            return
        try:
            async with self._uow_factory() as uow:
                await uow.notification_logs.create_many(logs)
                await uow.commit()
        except Exception:
            logger.exception("notification_log_persist_failed", count=len(logs))

    def _template_data(self, payload: dict[str, Any]) -> dict[str, Any]:
        data = dict(payload)
        nested = payload.get("templateData")
        if isinstance(nested, dict):
            data.update(nested)
        return data

    def _recipients_from_payload(
        self,
        manifest: NotificationManifest,
        payload: dict[str, Any],
    ) -> list[RecipientInfo]:
        audience = payload.get("audience")
        if not isinstance(audience, str) or audience not in manifest.audiences:
            audiences = self._resolver.get_available_audiences(manifest)
            if not audiences:
                return []
            audience = audiences[0]

        recipient = extract_recipient(payload, audience)
        if recipient is None:
            logger.warning(
                "notification_recipient_not_found",
                notification_type=manifest.type.value,
                payload_keys=sorted(payload),
            )
            return []
        return [recipient]

    @staticmethod
    def _dedupe(recipients: list[RecipientInfo]) -> list[RecipientInfo]:
        seen: set[tuple[str, str]] = set()
        unique: list[RecipientInfo] = []
        for recipient in recipients:
            key = (recipient.user_id, recipient.audience)
            if key in seen:
                continue
            seen.add(key)
            unique.append(recipient)
        return unique
