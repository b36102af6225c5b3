"""Unit tests for the in-memory event bus and notification listeners."""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from structlog.testing import capture_logs

from domain.entities.events import all_event_ids
from domain.entities.notification import NotificationChannel, NotificationGroup, NotificationType
from domain.entities.payload import SmsNotificationPayload
from domain.services.notification_listener import register_notification_listeners
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.notifications.log_sender import LoggingNotificationSender


class TestInMemoryEventBus:
    @pytest.mark.asyncio
    async def test_publish_calls_every_handler(self) -> None:
        bus = InMemoryEventBus()
        first, second = AsyncMock(), AsyncMock()
        bus.subscribe("center.created", first)
        bus.subscribe("center.created", second)

        await bus.publish("center.created", {"centerId": "c1"})

        first.assert_awaited_once_with("center.created", {"centerId": "c1"})
        second.assert_awaited_once_with("center.created", {"centerId": "c1"})

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_reach_publisher(self) -> None:
        bus = InMemoryEventBus()
        received: list[dict[str, Any]] = []

        async def broken(event_id: str, payload: dict[str, Any]) -> None:
            raise RuntimeError("boom")

        async def healthy(event_id: str, payload: dict[str, Any]) -> None:
            received.append(payload)

        bus.subscribe("user.created", broken)
        bus.subscribe("user.created", healthy)

        with capture_logs() as logs:
            await bus.publish("user.created", {"userId": "u1"})

        assert received == [{"userId": "u1"}]
        failure = next(e for e in logs if e["event"] == "event_handler_failed")
        assert failure["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_is_noop(self) -> None:
        await InMemoryEventBus().publish("nobody.listens", {})


class TestNotificationListeners:
    def test_subscribes_every_published_event(self) -> None:
        bus = InMemoryEventBus()

        subscribed = register_notification_listeners(bus, AsyncMock())

        assert subscribed == all_event_ids()
        assert all(len(bus.handlers_for(event_id)) == 1 for event_id in subscribed)

    @pytest.mark.asyncio
    async def test_published_event_is_dispatched(self) -> None:
        bus = InMemoryEventBus()
        service = AsyncMock()
        register_notification_listeners(bus, service, event_ids=["center.created"])

        await bus.publish("center.created", {"centerId": "c1"})

        service.dispatch.assert_awaited_once_with("center.created", {"centerId": "c1"})


class TestLoggingNotificationSender:
    @pytest.mark.asyncio
    async def test_send_logs_and_succeeds(self) -> None:
        payload = SmsNotificationPayload(
            recipient="+15551234567",
            channel=NotificationChannel.SMS,
            type=NotificationType.OTP,
            group=NotificationGroup.SECURITY,
            locale="en",
            user_id="u1",
            correlation_id="corr-1",
            content="code",
            template="sms/auth/otp",
        )

        with capture_logs() as logs:
            result = await LoggingNotificationSender().send(payload)

        assert result.success is True
        assert result.channel == NotificationChannel.SMS
        assert result.message_id
        assert logs[0]["event"] == "notification_sent"
        assert logs[0]["correlation_id"] == "corr-1"
