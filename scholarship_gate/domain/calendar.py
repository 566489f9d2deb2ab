"""Restricted-date calendar (holidays). Read-mostly shared lookup, no infrastructure."""

import threading
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Iterable, List, Optional


@dataclass(frozen=True)
class HolidayScope:
    """Limits which stored holidays are in force. None on a field means any."""

    year: Optional[int] = None
    month: Optional[int] = None

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["HolidayScope"]:
        """Parse "YYYY" or "YYYY-MM". Empty or None means no scope."""
        if value is None or not value.strip():
            return None
        parts = value.strip().split("-")
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else None
        return cls(year=year, month=month)

    def contains(self, d: date) -> bool:
        if self.year is not None and d.year != self.year:
            return False
        if self.month is not None and d.month != self.month:
            return False
        return True


class CalendarStore:
    """
    Set of restricted calendar dates. Membership is O(1).
    Updates are visible to later lookups; in-flight evaluations may see either state.
    """

    def __init__(
        self,
        dates: Iterable[date] = (),
        scope: Optional[HolidayScope] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._dates: FrozenSet[date] = frozenset(dates)
        self._scope = scope

    @property
    def scope(self) -> Optional[HolidayScope]:
        return self._scope

    def is_restricted_date(self, d: date) -> bool:
        """True iff d is a stored holiday inside the configured scope."""
        if self._scope is not None and not self._scope.contains(d):
            return False
        return d in self._dates

    def add(self, *dates: date) -> None:
        with self._lock:
            self._dates = self._dates | frozenset(dates)

    def remove(self, *dates: date) -> None:
        with self._lock:
            self._dates = self._dates - frozenset(dates)

    def dates(self) -> List[date]:
        """Sorted snapshot of every stored date, regardless of scope."""
        return sorted(self._dates)

    def __contains__(self, d: object) -> bool:
        return isinstance(d, date) and self.is_restricted_date(d)

    def __len__(self) -> int:
        return len(self._dates)
