"""Notification API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import (
    get_consistency_validator,
    get_manifest_resolver,
    get_notification_service,
)
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.notification import (
    AudienceResponse,
    ChannelConfigResponse,
    ChannelSelectionResponse,
    DispatchRequest,
    DispatchResponse,
    ManifestDetailResponse,
    ManifestListResponse,
    ManifestSummaryResponse,
    NotificationLogListResponse,
    NotificationLogResponse,
    PreviewRequest,
    PreviewResponse,
    RecipientErrorResponse,
    ValidationIssueResponse,
    ValidationReportResponse,
)
from core.exceptions import UnknownNotificationTypeError
from core.rate_limit import limiter
from domain.entities.dispatch import RecipientInfo
from domain.entities.manifest import (
    AudienceManifest,
    FixedChannels,
    NotificationManifest,
)
from domain.entities.notification import NotificationType
from domain.entities.notification_log import NotificationLog
from domain.services.consistency_validator import ManifestConsistencyValidator
from domain.services.manifest_resolver import ManifestResolver
from domain.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _parse_type(name: str) -> NotificationType:
    try:
        return NotificationType(name.upper())
    except ValueError:
        raise UnknownNotificationTypeError(name) from None


def _selection_response(audience: AudienceManifest) -> ChannelSelectionResponse:
    selection = audience.channel_selection()
    if isinstance(selection, FixedChannels):
        return ChannelSelectionResponse(
            kind="fixed",
            channels=[c.value for c in selection.channels],
        )
    return ChannelSelectionResponse(
        kind="by_profile",
        by_profile={
            profile.value: [c.value for c in channels]
            for profile, channels in selection.by_profile.items()
        },
        fallback=[c.value for c in selection.fallback],
    )


def _summary(manifest: NotificationManifest) -> ManifestSummaryResponse:
    return ManifestSummaryResponse(
        type=manifest.type.value,
        group=manifest.group.value,
        priority=manifest.priority,
        requires_audit=manifest.requires_audit,
        audiences=list(manifest.audiences),
        channels=sorted(c.value for c in manifest.channels_used()),
    )


def _log_response(log: NotificationLog) -> NotificationLogResponse:
    return NotificationLogResponse(
        id=log.id,
        correlation_id=log.correlation_id,
        notification_type=log.notification_type,
        channel=log.channel,
        audience=log.audience,
        user_id=log.user_id,
        status=log.status.value,
        recipient=log.recipient,
        center_id=log.center_id,
        error=log.error,
        template=log.template,
        locale=log.locale,
        requires_audit=log.requires_audit,
        metadata=log.metadata,
        created_at=log.created_at,
    )


@router.get(
    "/manifests",
    response_model=ManifestListResponse,
    summary="List notification manifests",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_manifests(
    request: Request,
    resolver: ManifestResolver = Depends(get_manifest_resolver),
) -> ManifestListResponse:
    """List every notification type with its audiences and channels."""
    manifests = [resolver.get_manifest(t) for t in NotificationType]
    return ManifestListResponse(
        data=[_summary(m) for m in manifests],
        meta={"count": len(manifests)},
    )


@router.get(
    "/manifests/{notification_type}",
    response_model=ManifestDetailResponse,
    summary="Get a notification manifest",
    responses={
        400: {"model": ErrorResponse, "description": "Unknown notification type"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_manifest(
    request: Request,
    notification_type: str,
    resolver: ManifestResolver = Depends(get_manifest_resolver),
) -> ManifestDetailResponse:
    """Get the full manifest of a notification type."""
    manifest = resolver.get_manifest(_parse_type(notification_type))
    return ManifestDetailResponse(
        type=manifest.type.value,
        group=manifest.group.value,
        priority=manifest.priority,
        requires_audit=manifest.requires_audit,
        required_variables=list(manifest.required_variables),
        template_base=manifest.template_base,
        audiences=[
            AudienceResponse(
                audience=name,
                channels=[
                    ChannelConfigResponse(
                        channel=channel.value,
                        template=resolver.template_for(manifest, config, channel),
                        subject=config.subject,
                        required_variables=(
                            list(config.required_variables)
                            if config.required_variables is not None
                            else None
                        ),
                        default_locale=config.default_locale,
                    )
                    for channel, config in audience.channels.items()
                ],
                selection=_selection_response(audience),
            )
            for name, audience in manifest.audiences.items()
        ],
    )


@router.post(
    "/preview",
    response_model=PreviewResponse,
    summary="Preview a notification payload",
    responses={
        400: {"model": ErrorResponse, "description": "Unknown type, audience or channel"},
        404: {"model": ErrorResponse, "description": "Template not found"},
        422: {"model": ErrorResponse, "description": "Missing template variables"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def preview_notification(
    request: Request,
    body: PreviewRequest,
    service: NotificationService = Depends(get_notification_service),
) -> PreviewResponse:
    """Resolve, validate, render and build one channel payload without sending it."""
    preview = service.preview(
        notification_type=_parse_type(body.notification_type),
        audience=body.audience,
        channel=body.channel,
        template_data=body.template_data,
        locale=body.locale,
        recipient=body.recipient,
        user_id=body.user_id,
        center_id=body.center_id,
        profile_type=body.profile_type,
    )
    return PreviewResponse(
        notification_type=preview.config.type.value,
        audience=preview.config.audience,
        channel=preview.config.channel.value,
        template=preview.config.template,
        locale=preview.config.locale,
        requested_locale=preview.config.requested_locale,
        used_fallback=preview.config.used_fallback,
        subject=preview.rendered.subject,
        content=preview.rendered.content,
        payload=preview.payload.to_dict(),
    )


@router.post(
    "/dispatch",
    response_model=DispatchResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Dispatch a domain event",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def dispatch_event(
    request: Request,
    body: DispatchRequest,
    service: NotificationService = Depends(get_notification_service),
) -> DispatchResponse:
    """Run a domain event through the notification pipeline and report the outcome."""
    recipients = None
    if body.recipients is not None:
        recipients = [RecipientInfo(**r.model_dump()) for r in body.recipients]

    result = await service.dispatch(body.event_id, body.payload, recipients=recipients)
    return DispatchResponse(
        correlation_id=result.correlation_id,
        total=result.total,
        sent=result.sent,
        failed=result.failed,
        skipped=result.skipped,
        errors=[
            RecipientErrorResponse(
                recipient_id=e.recipient_id,
                channel=e.channel.value if e.channel else None,
                reason=e.reason,
            )
            for e in result.errors
        ],
    )


@router.get(
    "/validation",
    response_model=ValidationReportResponse,
    summary="Manifest consistency report",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def get_validation_report(
    request: Request,
    validator: ManifestConsistencyValidator = Depends(get_consistency_validator),
) -> ValidationReportResponse:
    """Check manifests against event mappings and templates. Never fails on findings."""
    report = validator.collect()
    return ValidationReportResponse(
        ok=report.ok,
        strict=validator.strict,
        checked_types=report.checked_types,
        error_count=len(report.errors),
        warning_count=len(report.warnings),
        issues=[ValidationIssueResponse(**issue.to_dict()) for issue in report.issues],
    )


@router.get(
    "/logs",
    response_model=NotificationLogListResponse,
    summary="List delivery logs",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_delivery_logs(
    request: Request,
    correlation_id: str | None = Query(None, max_length=64, description="Dispatch correlation ID"),
    notification_type: str | None = Query(None, description="Filter by notification type"),
    limit: int = Query(50, ge=1, le=200, description="Max rows"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationLogListResponse:
    """List delivery log rows for one dispatch, or the most recent ones."""
    if correlation_id:
        logs = await service.get_delivery_logs(correlation_id)
    else:
        type_filter = _parse_type(notification_type).value if notification_type else None
        logs = await service.get_recent_delivery_logs(limit=limit, notification_type=type_filter)
    return NotificationLogListResponse(
        data=[_log_response(log) for log in logs],
        meta={"count": len(logs)},
    )
