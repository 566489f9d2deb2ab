"""DB-backed restricted-date calendar persistence (restricted_dates table)."""

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship_gate.infrastructure.database.models import RestrictedDate


class DbHolidayRepository:
    """Reads and edits persisted holidays. Implements HolidayRepository; commits its own writes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_dates(self) -> List[date]:
        result = await self._session.execute(
            select(RestrictedDate.restricted_date).order_by(RestrictedDate.restricted_date)
        )
        return list(result.scalars().all())

    async def add(self, dates: Iterable[date], description: Optional[str] = None) -> None:
        """Insert dates not already stored; existing rows are left as they are."""
        wanted = set(dates)
        if not wanted:
            return
        existing = await self._session.execute(
            select(RestrictedDate.restricted_date).where(
                RestrictedDate.restricted_date.in_(sorted(wanted))
            )
        )
        for d in sorted(wanted - set(existing.scalars().all())):
            self._session.add(RestrictedDate(restricted_date=d, description=description))
        await self._session.commit()

    async def remove(self, dates: Iterable[date]) -> None:
        wanted = list(set(dates))
        if not wanted:
            return
        await self._session.execute(
            delete(RestrictedDate).where(RestrictedDate.restricted_date.in_(sorted(wanted)))
        )
        await self._session.commit()
