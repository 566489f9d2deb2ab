"""Domain model for mutation attempts against protected tables. No ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from scholarship_gate.domain.exceptions import InvalidStateTransitionError


class MutationKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class GatewayState(str, Enum):
    """Lifecycle of one mutation attempt inside the gateway."""

    PENDING = "pending"
    EVALUATED_ALLOW = "evaluated_allow"
    EVALUATED_DENY = "evaluated_deny"
    COMMITTED = "committed"  # statement completed without error
    FAILED = "failed"
    AUDITED = "audited"


# Allowed transitions: every path ends in AUDITED, none skips it.
_STATE_TRANSITIONS: Dict[GatewayState, FrozenSet[GatewayState]] = {
    GatewayState.PENDING: frozenset({GatewayState.EVALUATED_ALLOW, GatewayState.EVALUATED_DENY}),
    GatewayState.EVALUATED_DENY: frozenset({GatewayState.AUDITED}),
    GatewayState.EVALUATED_ALLOW: frozenset({GatewayState.COMMITTED, GatewayState.FAILED}),
    GatewayState.COMMITTED: frozenset({GatewayState.AUDITED}),
    GatewayState.FAILED: frozenset({GatewayState.AUDITED}),
    GatewayState.AUDITED: frozenset(),
}


def _validate_transition(current: GatewayState, new: GatewayState) -> None:
    allowed = _STATE_TRANSITIONS.get(current, frozenset())
    if new not in allowed:
        raise InvalidStateTransitionError(
            f"Invalid gateway state transition from {current.value} to {new.value}"
        )


@dataclass(frozen=True)
class MutationRequest:
    """
    One insert/update/delete statement against a table.
    values: column values to insert or set. criteria: column equality filter for update/delete.
    """

    resource: str
    kind: MutationKind
    actor: str
    values: Dict[str, Any] = field(default_factory=dict)
    criteria: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None

    @property
    def operation(self) -> str:
        """Audit label, e.g. "INSERT students"."""
        return f"{self.kind.value.upper()} {self.resource}"


@dataclass
class MutationAttempt:
    """Tracks one request through the gateway. State changes only via transition_to()."""

    request: MutationRequest
    started_at: datetime
    state: GatewayState = GatewayState.PENDING
    history: List[Tuple[GatewayState, GatewayState]] = field(default_factory=list)

    def transition_to(self, new: GatewayState) -> None:
        _validate_transition(self.state, new)
        self.history.append((self.state, new))
        self.state = new

    @property
    def is_terminal(self) -> bool:
        return self.state == GatewayState.AUDITED


@dataclass(frozen=True)
class MutationResult:
    """Outcome returned to the caller for an applied statement."""

    resource: str
    operation: str
    rows_affected: int
    audit_id: Optional[int] = None
