"""Shared fixtures for unit tests."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.payload import DeliveryResult, NotificationPayload
from domain.services.manifest_resolver import ManifestResolver
from domain.services.notification_renderer import NotificationRenderer
from domain.services.notification_service import NotificationService
from domain.services.variable_validator import VariableValidator
from infrastructure.templates.filesystem_store import FileSystemTemplateStore


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked delivery log repository."""

    def __init__(self) -> None:
        self.notification_logs = AsyncMock()
        self.notification_logs.create_many = AsyncMock(side_effect=lambda logs: logs)
        self.notification_logs.list_by_correlation_id = AsyncMock(return_value=[])
        self.notification_logs.list_recent = AsyncMock(return_value=[])
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class RecordingSender:
    """Sender that keeps every payload and can be told to reject some."""

    def __init__(self, reject: set[str] | None = None) -> None:
        self.sent: list[NotificationPayload] = []
        self._reject = reject or set()

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        if payload.recipient in self._reject:
            return DeliveryResult(success=False, channel=payload.channel, error="rejected")
        self.sent.append(payload)
        return DeliveryResult(success=True, channel=payload.channel, message_id="msg-1")


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def template_store(templates_dir: Path) -> FileSystemTemplateStore:
    return FileSystemTemplateStore(templates_dir)


@pytest.fixture
def resolver(template_store: FileSystemTemplateStore) -> ManifestResolver:
    return ManifestResolver(template_store=template_store, default_locale="en")


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def service(
    resolver: ManifestResolver,
    template_store: FileSystemTemplateStore,
    sender: RecordingSender,
    uow: FakeUnitOfWork,
) -> NotificationService:
    """Lenient notification service wired to real manifests and templates."""
    return NotificationService(
        resolver=resolver,
        renderer=NotificationRenderer(template_store),
        sender=sender,
        variable_validator=VariableValidator(strict=False),
        uow_factory=lambda: uow,
    )


@pytest.fixture
def make_sender() -> type[RecordingSender]:
    """Sender class for tests that need rejections configured."""
    return RecordingSender
