"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from datetime import datetime
from typing import List, Optional, Protocol

from scholarship_gate.governance.audit_models import AuditEntry, AuditRecord


class AuditRepository(Protocol):
    """Append-only store of audit records. No update or delete."""

    async def append(self, entry: AuditEntry) -> AuditRecord:
        """Insert entry, assigning a fresh id. Visible to others once the unit of work commits."""
        ...

    async def list_between(
        self, start: datetime, end: Optional[datetime] = None
    ) -> List[AuditRecord]:
        """Records with start <= timestamp (<= end when given), in insertion order."""
        ...
