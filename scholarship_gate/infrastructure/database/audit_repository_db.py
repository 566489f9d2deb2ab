"""DB-backed audit repository. Append-only writes to the audit_log table."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship_gate.governance.audit_models import AuditEntry, AuditRecord
from scholarship_gate.infrastructure.database.models import AuditLog


def _as_utc(value: datetime) -> datetime:
    """Naive values are taken as UTC (SQLite returns naive datetimes)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_record(orm: AuditLog) -> AuditRecord:
    return AuditRecord(
        id=orm.id,
        actor=orm.actor,
        timestamp=_as_utc(orm.timestamp),
        operation=orm.operation,
        status=orm.status,
        correlation_id=orm.correlation_id,
    )


class DbAuditRepository:
    """
    Persists audit records in the caller's session. Implements AuditRepository protocol.
    Ids come from the table's autoincrement/sequence, so concurrent writers never share one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entry: AuditEntry) -> AuditRecord:
        """Insert and flush to obtain the id. Durable once the session commits."""
        orm = AuditLog(
            actor=entry.actor,
            timestamp=_as_utc(entry.timestamp),
            operation=entry.operation,
            status=entry.status,
            correlation_id=entry.correlation_id,
        )
        self._session.add(orm)
        await self._session.flush()
        return _to_record(orm)

    async def list_between(
        self, start: datetime, end: Optional[datetime] = None
    ) -> List[AuditRecord]:
        stmt = select(AuditLog).where(AuditLog.timestamp >= _as_utc(start))
        if end is not None:
            stmt = stmt.where(AuditLog.timestamp <= _as_utc(end))
        stmt = stmt.order_by(AuditLog.id)
        result = await self._session.execute(stmt)
        return [_to_record(orm) for orm in result.scalars().all()]
