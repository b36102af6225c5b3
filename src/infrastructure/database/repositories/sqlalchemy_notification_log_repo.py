"""SQLAlchemy implementation of the notification delivery log repository."""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.notification_log import DeliveryStatus, NotificationLog
from infrastructure.database.models import NotificationLogModel


class SQLAlchemyNotificationLogRepository:
    """SQLAlchemy implementation of INotificationLogRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_many(self, logs: List[NotificationLog]) -> List[NotificationLog]:
        """Persist a batch of delivery log entries."""
        models = [self._to_model(log) for log in logs]
        self._session.add_all(models)
        await self._session.flush()
        return [self._to_entity(model) for model in models]

    async def list_by_correlation_id(self, correlation_id: str) -> List[NotificationLog]:
        """Get every log entry written for one dispatch, oldest first."""
        stmt = (
            select(NotificationLogModel)
            .where(NotificationLogModel.correlation_id == correlation_id)
            .order_by(NotificationLogModel.created_at.asc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_recent(
        self,
        limit: int = 50,
        notification_type: str | None = None,
    ) -> List[NotificationLog]:
        """Get the newest log entries, optionally filtered by type."""
        stmt = select(NotificationLogModel)
        if notification_type:
            stmt = stmt.where(NotificationLogModel.notification_type == notification_type)
        stmt = stmt.order_by(NotificationLogModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: NotificationLogModel) -> NotificationLog:
        """Convert ORM model to domain entity."""
        return NotificationLog(
            id=model.id,
            correlation_id=model.correlation_id,
            notification_type=model.notification_type,
            channel=model.channel,
            audience=model.audience,
            user_id=model.user_id,
            status=DeliveryStatus(model.status),
            recipient=model.recipient,
            center_id=model.center_id,
            error=model.error,
            template=model.template,
            locale=model.locale,
            requires_audit=model.requires_audit,
            metadata=model.metadata_,
            created_at=model.created_at,
        )

    def _to_model(self, entity: NotificationLog) -> NotificationLogModel:
        """Convert domain entity to ORM model."""
        return NotificationLogModel(
            id=entity.id,
            correlation_id=entity.correlation_id,
            notification_type=entity.notification_type,
            channel=entity.channel,
            audience=entity.audience,
            user_id=entity.user_id,
            status=entity.status.value,
            recipient=entity.recipient,
            center_id=entity.center_id,
            error=entity.error,
            template=entity.template,
            locale=entity.locale,
            requires_audit=entity.requires_audit,
            metadata_=entity.metadata,
            created_at=entity.created_at,
        )
