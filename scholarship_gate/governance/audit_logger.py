"""Append-only audit recording for protected-table mutations. No FastAPI."""

import logging
from datetime import datetime, timezone
from typing import Optional

from scholarship_gate.governance.audit_models import AuditEntry, AuditRecord
from scholarship_gate.governance.audit_repository import AuditRepository
from scholarship_gate.governance.exceptions import AuditWriteFailureError

logger = logging.getLogger(__name__)


class AuditRecorder:
    """
    Writes one immutable audit record per mutation attempt via repository.
    Must include: who, when (UTC), which operation, outcome.
    A failed append surfaces as AuditWriteFailureError, never as a denial.
    """

    def __init__(self, repository: AuditRepository, logger: logging.Logger = logger) -> None:
        self._repository = repository
        self._logger = logger

    async def record(
        self,
        *,
        actor: str,
        operation: str,
        status: str,
        timestamp: Optional[datetime] = None,
        correlation_id: Optional[str] = None,
    ) -> AuditRecord:
        """Append audit record. Timestamp defaults to now (UTC)."""
        entry = AuditEntry(
            actor=actor,
            timestamp=timestamp or datetime.now(timezone.utc),
            operation=operation,
            status=status,
            correlation_id=correlation_id,
        )
        try:
            record = await self._repository.append(entry)
        except Exception as e:
            self._logger.error(
                "audit_write_failed",
                extra={"operation": operation, "audit_status": status, "error": str(e)},
            )
            raise AuditWriteFailureError(f"Audit write failed: {e}") from e
        self._logger.info("audit_recorded", extra={"audit": record.to_dict()})
        return record
