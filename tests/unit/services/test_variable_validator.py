"""Unit tests for required template variable checks."""

import pytest
from structlog.testing import capture_logs

from core.exceptions import MissingTemplateVariablesError
from domain.entities.notification import Audiences, NotificationChannel, NotificationType
from domain.manifests.registry import NOTIFICATION_REGISTRY
from domain.services.variable_validator import VariableValidator

OTP = NOTIFICATION_REGISTRY[NotificationType.OTP]
PASSWORD_RESET = NOTIFICATION_REGISTRY[NotificationType.PASSWORD_RESET]
CENTER_CREATED = NOTIFICATION_REGISTRY[NotificationType.CENTER_CREATED]


class TestRequiredFor:
    def test_manifest_level_set_applies_without_override(self) -> None:
        validator = VariableValidator()

        assert validator.required_for(OTP, Audiences.DEFAULT, NotificationChannel.EMAIL) == (
            "otpCode",
            "expiresIn",
        )

    def test_channel_override_replaces_manifest_set(self) -> None:
        validator = VariableValidator()

        assert validator.required_for(
            PASSWORD_RESET, Audiences.DEFAULT, NotificationChannel.SMS
        ) == ("resetLink",)

    def test_whatsapp_always_uses_manifest_set(self) -> None:
        validator = VariableValidator()

        assert validator.required_for(
            CENTER_CREATED, Audiences.OWNERS, NotificationChannel.WHATSAPP
        ) == ("centerName", "ownerName")

    def test_union_across_audiences(self) -> None:
        validator = VariableValidator()

        required = validator.required_for_audiences(
            CENTER_CREATED, [Audiences.OWNERS, Audiences.ADMIN, "UNKNOWN"]
        )

        assert required == ["centerName", "ownerName"]


class TestValidate:
    def test_all_present(self) -> None:
        result = VariableValidator().validate(
            OTP, Audiences.DEFAULT, NotificationChannel.SMS, {"otpCode": "1", "expiresIn": "2"}
        )

        assert result.valid is True
        assert result.missing == []

    def test_none_counts_as_missing(self) -> None:
        result = VariableValidator().validate(
            OTP, Audiences.DEFAULT, NotificationChannel.SMS, {"otpCode": "1", "expiresIn": None}
        )

        assert result.valid is False
        assert result.missing == ["expiresIn"]

    def test_falsy_values_are_present(self) -> None:
        result = VariableValidator().validate(
            OTP, Audiences.DEFAULT, NotificationChannel.SMS, {"otpCode": 0, "expiresIn": ""}
        )

        assert result.valid is True


class TestEnforce:
    def test_lenient_mode_logs_and_skips(self) -> None:
        validator = VariableValidator(strict=False)

        with capture_logs() as logs:
            allowed = validator.enforce(OTP, Audiences.DEFAULT, NotificationChannel.SMS, {})

        assert allowed is False
        entry = next(e for e in logs if e["event"] == "notification_missing_variables")
        assert entry["missing"] == ["otpCode", "expiresIn"]

    def test_strict_mode_raises(self) -> None:
        validator = VariableValidator(strict=True)

        with pytest.raises(MissingTemplateVariablesError) as exc_info:
            validator.enforce(OTP, Audiences.DEFAULT, NotificationChannel.SMS, {"otpCode": "1"})

        assert exc_info.value.missing == ["expiresIn"]
        assert exc_info.value.status_code == 422

    def test_valid_data_passes_in_both_modes(self) -> None:
        data = {"otpCode": "1", "expiresIn": "2"}

        assert VariableValidator(strict=True).enforce(
            OTP, Audiences.DEFAULT, NotificationChannel.SMS, data
        )
        assert VariableValidator(strict=False).enforce(
            OTP, Audiences.DEFAULT, NotificationChannel.SMS, data
        )
