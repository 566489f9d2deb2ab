"""SQLAlchemy unit of work: one AsyncSession shared by resource and audit repositories."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scholarship_gate.infrastructure.database.audit_repository_db import DbAuditRepository
from scholarship_gate.infrastructure.database.resource_repository_db import DbResourceRepository


class SqlUnitOfWork:
    """Implements UnitOfWork. Leaving the block without commit() rolls back."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlUnitOfWork":
        self._session = self._session_factory()
        self.resources = DbResourceRepository(self._session)
        self.audit = DbAuditRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()


class SqlUnitOfWorkFactory:
    """Callable returning a fresh SqlUnitOfWork per attempt."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def __call__(self) -> SqlUnitOfWork:
        return SqlUnitOfWork(self._session_factory)
