"""Pydantic schemas for Notification API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.notification import NotificationChannel, ProfileType


class ChannelConfigResponse(BaseModel):
    """Channel settings declared for one audience."""

    channel: str
    template: str | None = None
    subject: str | None = None
    required_variables: list[str] | None = None
    default_locale: str | None = None


class ChannelSelectionResponse(BaseModel):
    """How channels are chosen for recipients of an audience."""

    kind: str  # "fixed" or "by_profile"
    channels: list[str] = Field(default_factory=list)
    by_profile: dict[str, list[str]] = Field(default_factory=dict)
    fallback: list[str] = Field(default_factory=list)


class AudienceResponse(BaseModel):
    """One audience of a manifest."""

    audience: str
    channels: list[ChannelConfigResponse]
    selection: ChannelSelectionResponse


class ManifestSummaryResponse(BaseModel):
    """Catalog entry for a notification type."""

    type: str
    group: str
    priority: int
    requires_audit: bool
    audiences: list[str]
    channels: list[str]


class ManifestListResponse(BaseModel):
    """Notification catalog."""

    data: list[ManifestSummaryResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ManifestDetailResponse(BaseModel):
    """Full manifest for a notification type."""

    type: str
    group: str
    priority: int
    requires_audit: bool
    required_variables: list[str]
    template_base: str | None = None
    audiences: list[AudienceResponse]


class PreviewRequest(BaseModel):
    """Render and build one channel payload without sending it."""

    notification_type: str = Field(..., examples=["OTP"])
    audience: str = Field(..., examples=["DEFAULT"])
    channel: NotificationChannel
    locale: str | None = Field(None, max_length=16)
    template_data: dict[str, Any] = Field(default_factory=dict)
    recipient: str | None = Field(None, max_length=255)
    user_id: str = Field("preview", max_length=64)
    center_id: str | None = None
    profile_type: ProfileType | None = None


class PreviewResponse(BaseModel):
    """Resolved configuration, rendered content and built payload."""

    notification_type: str
    audience: str
    channel: str
    template: str
    locale: str
    requested_locale: str
    used_fallback: bool
    subject: str | None = None
    content: str | dict[str, Any]
    payload: dict[str, Any]


class RecipientRequest(BaseModel):
    """Explicit recipient for a dispatch."""

    user_id: str = Field(..., min_length=1, max_length=64)
    audience: str
    email: str | None = None
    phone: str | None = None
    locale: str | None = None
    center_id: str | None = None
    profile_type: ProfileType | None = None
    profile_id: str | None = None
    template_data: dict[str, Any] = Field(default_factory=dict)


class DispatchRequest(BaseModel):
    """Publish a domain event to the notification pipeline."""

    event_id: str = Field(..., min_length=1, max_length=128, examples=["center.created"])
    payload: dict[str, Any] = Field(default_factory=dict)
    recipients: list[RecipientRequest] | None = None


class RecipientErrorResponse(BaseModel):
    recipient_id: str
    channel: str | None = None
    reason: str


class DispatchResponse(BaseModel):
    """Aggregate result of a dispatch."""

    correlation_id: str | None = None
    total: int
    sent: int
    failed: int
    skipped: int
    errors: list[RecipientErrorResponse]


class ValidationIssueResponse(BaseModel):
    message: str
    severity: str
    notification_type: str | None = None
    audience: str | None = None
    channel: str | None = None
    locale: str | None = None
    template_path: str | None = None


class ValidationReportResponse(BaseModel):
    """Manifest/template consistency report."""

    ok: bool
    strict: bool
    checked_types: int
    error_count: int
    warning_count: int
    issues: list[ValidationIssueResponse]


class NotificationLogResponse(BaseModel):
    """Delivery log row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    correlation_id: str
    notification_type: str
    channel: str
    audience: str
    user_id: str
    status: str
    recipient: str | None = None
    center_id: str | None = None
    error: str | None = None
    template: str | None = None
    locale: str | None = None
    requires_audit: bool
    metadata: dict[str, Any] | None = None
    created_at: datetime


class NotificationLogListResponse(BaseModel):
    """Delivery log rows."""

    data: list[NotificationLogResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
