"""Domain layer: calendar, access policy, mutation models, schemas, validators. Pure business logic only."""

from scholarship_gate.domain.calendar import CalendarStore, HolidayScope
from scholarship_gate.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidStateTransitionError,
    PolicyViolationError,
    UnknownResourceError,
)
from scholarship_gate.domain.models import (
    GatewayState,
    MutationAttempt,
    MutationKind,
    MutationRequest,
    MutationResult,
)
from scholarship_gate.domain.policy import (
    AccessDecision,
    AccessOutcome,
    DenialReason,
    evaluate,
)

__all__ = [
    "AccessDecision",
    "AccessOutcome",
    "CalendarStore",
    "DenialReason",
    "DomainError",
    "DomainValidationError",
    "GatewayState",
    "HolidayScope",
    "InvalidStateTransitionError",
    "MutationAttempt",
    "MutationKind",
    "MutationRequest",
    "MutationResult",
    "PolicyViolationError",
    "UnknownResourceError",
    "evaluate",
]
