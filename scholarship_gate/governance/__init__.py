"""Governance: append-only audit trail for protected-table mutations. No FastAPI."""

from scholarship_gate.governance.audit_logger import AuditRecorder
from scholarship_gate.governance.audit_models import AuditEntry, AuditRecord, AuditStatus
from scholarship_gate.governance.audit_query import AuditQueryService
from scholarship_gate.governance.exceptions import AuditWriteFailureError, GovernanceError

__all__ = [
    "AuditEntry",
    "AuditQueryService",
    "AuditRecord",
    "AuditRecorder",
    "AuditStatus",
    "AuditWriteFailureError",
    "GovernanceError",
]
