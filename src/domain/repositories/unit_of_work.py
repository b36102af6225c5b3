"""Unit of Work protocol."""

from typing import Any, Protocol

from domain.repositories.notification_log_repository import INotificationLogRepository


class IUnitOfWork(Protocol):
    """Transaction boundary around delivery log writes.

    Work not committed before the context exits is rolled back.
    """

    notification_logs: INotificationLogRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
