"""Immutable audit record model. Domain-level immutability."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

ALLOWED = "Allowed"
DENIED_PREFIX = "Denied: "
FAILED_PREFIX = "Allowed but failed: "
CANCELED_DETAIL = "canceled"


class AuditStatus:
    """Builds the three status strings an audit record may carry."""

    @staticmethod
    def allowed() -> str:
        return ALLOWED

    @staticmethod
    def denied(reason: str) -> str:
        return f"{DENIED_PREFIX}{reason}"

    @staticmethod
    def failed(detail: str, max_length: Optional[int] = None) -> str:
        status = f"{FAILED_PREFIX}{detail}"
        if max_length is not None and len(status) > max_length:
            status = status[: max_length - 3] + "..."
        return status


@dataclass(frozen=True)
class AuditEntry:
    """An audit record before insertion; the repository assigns the id."""

    actor: str
    timestamp: datetime
    operation: str
    status: str
    correlation_id: Optional[str] = None


@dataclass(frozen=True)
class AuditRecord:
    """
    Immutable audit record: who, when, which operation, outcome.
    id is assigned at insertion, increases monotonically and is never reused.
    """

    id: int
    actor: str
    timestamp: datetime
    operation: str
    status: str
    correlation_id: Optional[str] = None

    @property
    def is_denied(self) -> bool:
        return self.status.startswith(DENIED_PREFIX)

    @property
    def is_failed(self) -> bool:
        return self.status.startswith(FAILED_PREFIX)

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "id": self.id,
            "actor": self.actor,
            "timestamp": self.timestamp.isoformat(),
            "operation": self.operation,
            "status": self.status,
            "correlation_id": self.correlation_id,
        }
