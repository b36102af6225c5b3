"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    MANIFEST_NOT_FOUND = "MANIFEST_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"

    # Validation errors (400/422)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_NOTIFICATION_TYPE = "UNKNOWN_NOTIFICATION_TYPE"
    AUDIENCE_NOT_SUPPORTED = "AUDIENCE_NOT_SUPPORTED"
    CHANNEL_NOT_SUPPORTED = "CHANNEL_NOT_SUPPORTED"
    MISSING_TEMPLATE_VARIABLES = "MISSING_TEMPLATE_VARIABLES"
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    PAYLOAD_BUILD_FAILED = "PAYLOAD_BUILD_FAILED"

    # Configuration errors (500)
    MANIFEST_REGISTRY_ERROR = "MANIFEST_REGISTRY_ERROR"
    MANIFEST_VALIDATION_FAILED = "MANIFEST_VALIDATION_FAILED"
    TEMPLATE_RENDERING_FAILED = "TEMPLATE_RENDERING_FAILED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ManifestNotFoundError(AppException):
    """No manifest registered for a notification type."""

    def __init__(self, notification_type: str) -> None:
        super().__init__(
            error_code=ErrorCode.MANIFEST_NOT_FOUND,
            message=f"Missing manifest for type: {notification_type}",
            status_code=404,
            details={"notification_type": notification_type},
        )


class ManifestRegistryError(AppException):
    """The manifest registry could not be built (duplicate or missing entries)."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.MANIFEST_REGISTRY_ERROR,
            message=message,
            status_code=500,
            details=details,
        )


class ManifestValidationError(AppException):
    """Manifest/template consistency check failed in strict mode."""

    def __init__(self, issues: list[dict[str, Any]]) -> None:
        super().__init__(
            error_code=ErrorCode.MANIFEST_VALIDATION_FAILED,
            message=f"Manifest validation failed with {len(issues)} error(s)",
            status_code=500,
            details={"issues": issues},
        )


class UnknownNotificationTypeError(AppException):
    """A notification type name is not part of the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(
            error_code=ErrorCode.UNKNOWN_NOTIFICATION_TYPE,
            message=f"Unknown notification type: {name}",
            status_code=400,
            details={"notification_type": name},
        )


class AudienceNotSupportedError(AppException):
    """Requested audience is not declared by the manifest."""

    def __init__(self, notification_type: str, audience: str) -> None:
        super().__init__(
            error_code=ErrorCode.AUDIENCE_NOT_SUPPORTED,
            message=f"Audience {audience} not supported for {notification_type}",
            status_code=400,
            details={"notification_type": notification_type, "audience": audience},
        )


class ChannelNotSupportedError(AppException):
    """Requested channel is not declared for the audience."""

    def __init__(self, notification_type: str, audience: str, channel: str) -> None:
        super().__init__(
            error_code=ErrorCode.CHANNEL_NOT_SUPPORTED,
            message=f"Channel {channel} not supported for {notification_type}:{audience}",
            status_code=400,
            details={
                "notification_type": notification_type,
                "audience": audience,
                "channel": channel,
            },
        )


class MissingTemplateVariablesError(AppException):
    """Template data lacks variables the manifest requires."""

    def __init__(
        self,
        notification_type: str,
        audience: str,
        channel: str,
        missing: list[str],
    ) -> None:
        self.missing = missing
        super().__init__(
            error_code=ErrorCode.MISSING_TEMPLATE_VARIABLES,
            message=(
                f"Missing required template variables for "
                f"{notification_type}:{audience}:{channel}: {', '.join(missing)}"
            ),
            status_code=422,
            details={
                "notification_type": notification_type,
                "audience": audience,
                "channel": channel,
                "missing": missing,
            },
        )


class InvalidRecipientError(AppException):
    """Recipient address is unusable for the channel."""

    def __init__(self, channel: str, recipient: str | None) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_RECIPIENT,
            message=f"Invalid recipient for {channel}: {recipient!r}",
            status_code=422,
            details={"channel": channel, "recipient": recipient},
        )


class PayloadBuildError(AppException):
    """The payload builder rejected the rendered notification."""

    def __init__(self, notification_type: str, channel: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.PAYLOAD_BUILD_FAILED,
            message=f"Failed to build {channel} payload for {notification_type}: {reason}",
            status_code=422,
            details={"notification_type": notification_type, "channel": channel},
        )


class TemplateNotFoundError(AppException):
    """Template file is missing from the template store."""

    def __init__(self, template: str, locale: str, path: str) -> None:
        super().__init__(
            error_code=ErrorCode.TEMPLATE_NOT_FOUND,
            message=f"Template not found: {template} for locale {locale} ({path})",
            status_code=404,
            details={"template": template, "locale": locale, "path": path},
        )


class TemplateRenderingError(AppException):
    """Template exists but could not be rendered."""

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.TEMPLATE_RENDERING_FAILED,
            message=f"Failed to render template {template}: {reason}",
            status_code=500,
            details={"template": template},
        )
