"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.consistency_validator import ManifestConsistencyValidator
from domain.services.manifest_resolver import ManifestResolver
from domain.services.notification_renderer import NotificationRenderer
from domain.services.notification_service import NotificationService
from domain.services.payload_builder import PayloadBuilder
from domain.services.variable_validator import VariableValidator
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.notifications.log_sender import LoggingNotificationSender
from infrastructure.templates.filesystem_store import FileSystemTemplateStore


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_template_store() -> FileSystemTemplateStore:
    """Get the notification template store."""
    return FileSystemTemplateStore(settings.notification_templates_dir)


@lru_cache
def get_manifest_resolver() -> ManifestResolver:
    """Get Manifest resolver instance."""
    return ManifestResolver(
        template_store=get_template_store(),
        default_locale=settings.notification_default_locale,
    )


@lru_cache
def get_variable_validator() -> VariableValidator:
    """Get template variable validator."""
    return VariableValidator(strict=settings.strict_notification_validation)


@lru_cache
def get_notification_sender() -> LoggingNotificationSender:
    """Get the notification transport."""
    return LoggingNotificationSender()


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(
        resolver=get_manifest_resolver(),
        renderer=NotificationRenderer(get_template_store()),
        sender=get_notification_sender(),
        variable_validator=get_variable_validator(),
        payload_builder=PayloadBuilder(),
        uow_factory=get_uow_factory() if settings.notification_log_deliveries else None,
        concurrency_limit=settings.notification_concurrency_limit,
        bulk_log_threshold=settings.notification_bulk_log_threshold,
    )


@lru_cache
def get_event_bus() -> InMemoryEventBus:
    """Get the process-wide domain event bus."""
    return InMemoryEventBus()


@lru_cache
def get_consistency_validator() -> ManifestConsistencyValidator:
    """Get Manifest consistency validator."""
    return ManifestConsistencyValidator(
        template_store=get_template_store(),
        default_locale=settings.notification_default_locale,
        supported_locales=settings.supported_locales_list,
        strict=settings.strict_notification_validation,
    )
