"""Administrative calendar surface: keeps the in-memory store and persisted holidays in step."""

import logging
from datetime import date
from typing import Iterable, List, Protocol

from scholarship_gate.domain.calendar import CalendarStore

logger = logging.getLogger(__name__)


class HolidayRepository(Protocol):
    async def list_dates(self) -> List[date]:
        ...

    async def add(self, dates: Iterable[date]) -> None:
        ...

    async def remove(self, dates: Iterable[date]) -> None:
        ...


class CalendarService:
    """Persist first, then publish to the store, so a failed write never changes policy."""

    def __init__(self, store: CalendarStore, repository: HolidayRepository) -> None:
        self._store = store
        self._repository = repository

    async def load(self) -> List[date]:
        """Merge persisted holidays into the store (start-up)."""
        persisted = await self._repository.list_dates()
        self._store.add(*persisted)
        logger.info("calendar_loaded", extra={"count": len(self._store)})
        return self._store.dates()

    async def add_dates(self, dates: Iterable[date]) -> List[date]:
        dates = list(dates)
        await self._repository.add(dates)
        self._store.add(*dates)
        logger.info("calendar_dates_added", extra={"dates": [d.isoformat() for d in dates]})
        return self._store.dates()

    async def remove_dates(self, dates: Iterable[date]) -> List[date]:
        dates = list(dates)
        await self._repository.remove(dates)
        self._store.remove(*dates)
        logger.info("calendar_dates_removed", extra={"dates": [d.isoformat() for d in dates]})
        return self._store.dates()

    def list_dates(self) -> List[date]:
        return self._store.dates()
