"""Read-only audit trail queries for reporting."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from scholarship_gate.domain.validators import validate_time_window
from scholarship_gate.governance.audit_models import AuditRecord
from scholarship_gate.governance.audit_repository import AuditRepository

DEFAULT_LOOKBACK_DAYS = 7


class AuditQueryService:
    """Time-window retrieval over the audit trail. Results in insertion order."""

    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    async def between(self, start: datetime, end: Optional[datetime] = None) -> List[AuditRecord]:
        validate_time_window(start, end)
        return await self._repository.list_between(start, end)

    async def recent(
        self,
        days: int = DEFAULT_LOOKBACK_DAYS,
        now: Optional[datetime] = None,
    ) -> List[AuditRecord]:
        """All records from the last `days` days, e.g. the weekly report."""
        now = now or datetime.now(timezone.utc)
        return await self._repository.list_between(now - timedelta(days=days), now)
