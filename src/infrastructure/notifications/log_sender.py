"""Sender that records payloads in the application log."""

from uuid import uuid4

import structlog

from domain.entities.payload import DeliveryResult, NotificationPayload

logger = structlog.get_logger()


class LoggingNotificationSender:
    """Stand-in transport: logs each payload and reports success.

    Real transports (SMTP, SMS gateway, WhatsApp, push) plug in behind the
    same INotificationSender protocol.
    """

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        message_id = str(uuid4())
        logger.info(
            "notification_sent",
            message_id=message_id,
            channel=payload.channel.value,
            notification_type=payload.type.value,
            recipient=payload.recipient,
            user_id=payload.user_id,
            correlation_id=payload.correlation_id,
        )
        return DeliveryResult(success=True, channel=payload.channel, message_id=message_id)
