"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_notification_log_repo import (
    SQLAlchemyNotificationLogRepository,
)


class SQLAlchemyUnitOfWork:
    """Unit of Work over one session.

    Uncommitted work is rolled back on exit, so a dispatch that fails to
    persist its delivery log leaves nothing half-written.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._notification_logs: Optional[SQLAlchemyNotificationLogRepository] = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def notification_logs(self) -> SQLAlchemyNotificationLogRepository:
        session = self._require_session()
        if self._notification_logs is None:
            self._notification_logs = SQLAlchemyNotificationLogRepository(session)
        return self._notification_logs

    async def commit(self) -> None:
        await self._require_session().commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        session = self._require_session()
        try:
            if exc_type is not None or session.in_transaction():
                await session.rollback()
        finally:
            await session.close()
            self._session = None
            self._notification_logs = None
