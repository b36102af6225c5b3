"""Unit tests for Notification service layer."""

import pytest
import structlog
from structlog.testing import capture_logs

from core.exceptions import (
    AudienceNotSupportedError,
    ChannelNotSupportedError,
    MissingTemplateVariablesError,
)
from domain.entities.dispatch import RecipientInfo
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationType,
    ProfileType,
)
from domain.entities.notification_log import DeliveryStatus
from domain.entities.payload import (
    EmailNotificationPayload,
    InAppNotificationPayload,
    WhatsAppNotificationPayload,
)
from domain.services.manifest_resolver import ManifestResolver
from domain.services.notification_renderer import NotificationRenderer
from domain.services.notification_service import NotificationService, current_correlation_id
from domain.services.variable_validator import VariableValidator
from infrastructure.templates.filesystem_store import FileSystemTemplateStore


def _target(user_id: str, email: str | None = None, phone: str | None = None) -> RecipientInfo:
    return RecipientInfo(user_id=user_id, audience=Audiences.TARGET, email=email, phone=phone)


class TestSendBulk:
    """Tests for fan-out to many recipients."""

    @pytest.mark.asyncio
    async def test_one_invalid_email_does_not_affect_others(
        self, service: NotificationService, sender
    ) -> None:
        """An invalid address fails only its own recipient."""
        recipients = [
            _target("u1", email="u1@example.com"),
            _target("u2", email="u2@example.com"),
            _target("u3", email="not-an-email"),
            _target("u4", email="u4@example.com"),
            _target("u5", email="u5@example.com"),
        ]

        result = await service.send(
            NotificationType.USER_DELETED, {"name": "Sam"}, recipients=recipients
        )

        assert result.total == 5
        assert result.sent == 4
        assert result.failed == 1
        assert result.skipped == 0
        assert len(result.errors) == 1
        assert result.errors[0].recipient_id == "u3"
        assert result.errors[0].channel == NotificationChannel.EMAIL
        assert len(sender.sent) == 4

    @pytest.mark.asyncio
    async def test_invalid_email_fails_multi_channel_recipient(
        self, service: NotificationService, sender
    ) -> None:
        """Other channels still go out, but the recipient counts as failed."""
        recipients = [
            _target(f"u{i}", email=f"u{i}@example.com", phone=f"+1555000000{i}")
            for i in range(1, 6)
        ]
        recipients[2] = _target("u3", email="bad", phone="+15550000003")

        result = await service.send(
            NotificationType.USER_REGISTERED, {"name": "Sam"}, recipients=recipients
        )

        assert (result.total, result.sent, result.failed, result.skipped) == (5, 4, 1, 0)
        assert [(e.recipient_id, e.channel) for e in result.errors] == [
            ("u3", NotificationChannel.EMAIL)
        ]
        u3_channels = {p.channel for p in sender.sent if p.user_id == "u3"}
        assert u3_channels == {NotificationChannel.WHATSAPP, NotificationChannel.IN_APP}

    @pytest.mark.asyncio
    async def test_duplicate_recipients_are_sent_once(
        self, service: NotificationService, sender
    ) -> None:
        recipients = [
            _target("u1", email="u1@example.com"),
            _target("u1", email="u1@example.com"),
        ]

        result = await service.send(
            NotificationType.USER_DELETED, {"name": "Sam"}, recipients=recipients
        )

        assert result.total == 1
        assert result.sent == 1
        assert len(sender.sent) == 1

    @pytest.mark.asyncio
    async def test_sender_rejection_counts_as_failure(
        self,
        resolver: ManifestResolver,
        template_store: FileSystemTemplateStore,
        uow,
        make_sender,
    ) -> None:
        service = NotificationService(
            resolver=resolver,
            renderer=NotificationRenderer(template_store),
            sender=make_sender(reject={"u2@example.com"}),
            variable_validator=VariableValidator(),
            uow_factory=lambda: uow,
        )

        result = await service.send(
            NotificationType.USER_DELETED,
            {"name": "Sam"},
            recipients=[_target("u1", email="u1@example.com"), _target("u2", email="u2@example.com")],
        )

        assert result.sent == 1
        assert result.failed == 1
        assert result.errors[0].reason == "rejected"

    @pytest.mark.asyncio
    async def test_missing_address_is_skipped_not_failed(
        self, service: NotificationService, sender
    ) -> None:
        """A recipient without an email is skipped for an email-only notification."""
        result = await service.send(
            NotificationType.USER_DELETED, {"name": "Sam"}, recipients=[_target("u1")]
        )

        assert result.skipped == 1
        assert result.failed == 0
        assert result.errors == []
        assert sender.sent == []


class TestSendChannels:
    """Tests for per-recipient channel selection and payloads."""

    @pytest.mark.asyncio
    async def test_registered_user_gets_email_whatsapp_and_in_app(
        self, service: NotificationService, sender
    ) -> None:
        result = await service.send(
            NotificationType.USER_REGISTERED,
            {"name": "Lina"},
            recipients=[_target("u1", email="lina@example.com", phone="+15551234567")],
        )

        assert result.sent == 1
        kinds = {type(p) for p in sender.sent}
        assert kinds == {
            EmailNotificationPayload,
            WhatsAppNotificationPayload,
            InAppNotificationPayload,
        }
        email = next(p for p in sender.sent if isinstance(p, EmailNotificationPayload))
        assert email.subject == "Welcome to EduCenter, Lina"
        assert email.recipient == "lina@example.com"

    @pytest.mark.asyncio
    async def test_profile_selection_limits_admin_to_in_app(
        self, service: NotificationService, sender
    ) -> None:
        recipients = [
            RecipientInfo(
                user_id="admin-1",
                audience=Audiences.STAFF,
                phone="+15550000001",
                profile_type=ProfileType.ADMIN,
            ),
            RecipientInfo(
                user_id="staff-1",
                audience=Audiences.STAFF,
                phone="+15550000002",
                profile_type=ProfileType.STAFF,
            ),
        ]

        await service.send(
            NotificationType.CENTER_UPDATED, {"centerName": "North"}, recipients=recipients
        )

        by_user = {}
        for payload in sender.sent:
            by_user.setdefault(payload.user_id, set()).add(payload.channel)
        assert by_user["admin-1"] == {NotificationChannel.IN_APP}
        assert by_user["staff-1"] == {NotificationChannel.IN_APP, NotificationChannel.WHATSAPP}

    @pytest.mark.asyncio
    async def test_unknown_profile_falls_back_to_in_app(
        self, service: NotificationService, sender
    ) -> None:
        recipient = RecipientInfo(
            user_id="parent-1",
            audience=Audiences.STAFF,
            phone="+15550000003",
            profile_type=ProfileType.PARENT,
        )

        await service.send(
            NotificationType.CENTER_UPDATED, {"centerName": "North"}, recipients=[recipient]
        )

        assert [p.channel for p in sender.sent] == [NotificationChannel.IN_APP]

    @pytest.mark.asyncio
    async def test_recipient_extracted_from_payload(
        self, service: NotificationService, sender
    ) -> None:
        result = await service.send(
            NotificationType.OTP,
            {
                "userId": "u-9",
                "email": "otp@example.com",
                "otpCode": "123456",
                "expiresIn": "5 minutes",
            },
        )

        assert result.total == 1
        assert result.sent == 1
        email = next(p for p in sender.sent if isinstance(p, EmailNotificationPayload))
        assert "123456" in email.html

    @pytest.mark.asyncio
    async def test_payload_without_user_has_no_recipients(
        self, service: NotificationService
    ) -> None:
        result = await service.send(NotificationType.OTP, {"otpCode": "1"})

        assert result.total == 0
        assert result.sent == 0


class TestVariableGate:
    """Tests for required-variable handling."""

    @pytest.mark.asyncio
    async def test_lenient_mode_skips_channel(
        self, service: NotificationService, sender
    ) -> None:
        result = await service.send(
            NotificationType.USER_DELETED,
            {},
            recipients=[_target("u1", email="u1@example.com")],
        )

        assert result.skipped == 1
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_strict_mode_records_failure(
        self,
        resolver: ManifestResolver,
        template_store: FileSystemTemplateStore,
        sender,
    ) -> None:
        """Strict mode turns missing variables into a failed delivery, never a raise."""
        service = NotificationService(
            resolver=resolver,
            renderer=NotificationRenderer(template_store),
            sender=sender,
            variable_validator=VariableValidator(strict=True),
        )

        result = await service.send(
            NotificationType.USER_DELETED,
            {},
            recipients=[_target("u1", email="u1@example.com")],
        )

        assert result.failed == 1
        assert "name" in result.errors[0].reason
        assert sender.sent == []


class TestDispatch:
    """Tests for event-driven dispatch."""

    @pytest.mark.asyncio
    async def test_mapped_event_sends(
        self, service: NotificationService, sender
    ) -> None:
        result = await service.dispatch(
            "user.deleted",
            {"userId": "u1", "email": "u1@example.com", "name": "Sam"},
        )

        assert result.sent == 1
        assert sender.sent[0].type == NotificationType.USER_DELETED

    @pytest.mark.asyncio
    async def test_unmapped_event_returns_empty_result(
        self, service: NotificationService, sender
    ) -> None:
        with capture_logs() as logs:
            result = await service.dispatch("center.exported", {"centerId": "c1"})

        assert result.total == 0
        assert sender.sent == []
        entry = next(e for e in logs if e["event"] == "notification_event_unmapped")
        assert entry["log_level"] == "info"

    @pytest.mark.asyncio
    async def test_unmapped_security_event_logs_warning(
        self, service: NotificationService
    ) -> None:
        with capture_logs() as logs:
            await service.dispatch("auth.login.failed", {})

        entry = next(e for e in logs if e["event"] == "notification_event_unmapped")
        assert entry["log_level"] == "warning"
        assert entry["priority"] == 4

    @pytest.mark.asyncio
    async def test_correlation_id_reuses_bound_request_id(
        self, service: NotificationService
    ) -> None:
        with structlog.contextvars.bound_contextvars(request_id="req-42"):
            result = await service.dispatch("center.exported", {})

        assert result.correlation_id == "req-42"

    def test_correlation_id_generated_when_unbound(self) -> None:
        structlog.contextvars.clear_contextvars()
        assert current_correlation_id() != current_correlation_id()


class TestDeliveryLogs:
    """Tests for delivery log persistence."""

    @pytest.mark.asyncio
    async def test_logs_one_row_per_attempt(
        self, service: NotificationService, uow
    ) -> None:
        await service.send(
            NotificationType.USER_DELETED,
            {"name": "Sam"},
            recipients=[_target("u1", email="u1@example.com"), _target("u2", email="bad")],
            correlation_id="corr-1",
        )

        assert uow.committed is True
        logs = uow.notification_logs.create_many.call_args.args[0]
        assert len(logs) == 2
        assert {log.status for log in logs} == {DeliveryStatus.SENT, DeliveryStatus.FAILED}
        assert all(log.correlation_id == "corr-1" for log in logs)
        assert all(log.requires_audit for log in logs)

    @pytest.mark.asyncio
    async def test_persist_failure_does_not_break_dispatch(
        self, service: NotificationService, uow
    ) -> None:
        uow.notification_logs.create_many.side_effect = RuntimeError("db down")

        result = await service.send(
            NotificationType.USER_DELETED,
            {"name": "Sam"},
            recipients=[_target("u1", email="u1@example.com")],
        )

        assert result.sent == 1

    @pytest.mark.asyncio
    async def test_reads_without_uow_return_empty(
        self,
        resolver: ManifestResolver,
        template_store: FileSystemTemplateStore,
        sender,
    ) -> None:
        service = NotificationService(
            resolver=resolver,
            renderer=NotificationRenderer(template_store),
            sender=sender,
            variable_validator=VariableValidator(),
        )

        assert await service.get_delivery_logs("x") == []
        assert await service.get_recent_delivery_logs() == []


class TestPreview:
    """Tests for single-channel previews."""

    def test_preview_builds_whatsapp_parameters_in_order(
        self, service: NotificationService
    ) -> None:
        preview = service.preview(
            NotificationType.OTP,
            Audiences.DEFAULT,
            NotificationChannel.WHATSAPP,
            {"expiresIn": "5 minutes", "otpCode": "123456"},
            recipient="+15551234567",
        )

        assert isinstance(preview.payload, WhatsAppNotificationPayload)
        assert preview.payload.template_name == "otp_verification"
        assert [p["text"] for p in preview.payload.template_parameters] == [
            "123456",
            "5 minutes",
        ]

    def test_preview_falls_back_to_default_locale(self, service: NotificationService) -> None:
        preview = service.preview(
            NotificationType.USER_DELETED,
            Audiences.TARGET,
            NotificationChannel.EMAIL,
            {"name": "Sam"},
            locale="ar",
        )

        assert preview.config.locale == "en"
        assert preview.config.requested_locale == "ar"
        assert preview.config.used_fallback is True

    def test_preview_uses_requested_locale_when_present(
        self, service: NotificationService
    ) -> None:
        preview = service.preview(
            NotificationType.OTP,
            Audiences.DEFAULT,
            NotificationChannel.SMS,
            {"otpCode": "123456", "expiresIn": "5"},
            locale="ar",
        )

        assert preview.config.locale == "ar"
        assert preview.config.used_fallback is False

    def test_preview_unknown_audience(self, service: NotificationService) -> None:
        with pytest.raises(AudienceNotSupportedError):
            service.preview(
                NotificationType.OTP, "NOBODY", NotificationChannel.EMAIL, {}
            )

    def test_preview_unsupported_channel(self, service: NotificationService) -> None:
        with pytest.raises(ChannelNotSupportedError):
            service.preview(
                NotificationType.OTP, Audiences.DEFAULT, NotificationChannel.PUSH, {}
            )

    def test_preview_missing_variables(self, service: NotificationService) -> None:
        with pytest.raises(MissingTemplateVariablesError) as exc_info:
            service.preview(
                NotificationType.OTP,
                Audiences.DEFAULT,
                NotificationChannel.EMAIL,
                {"otpCode": "123456"},
            )

        assert exc_info.value.missing == ["expiresIn"]
