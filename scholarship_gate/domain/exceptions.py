"""Domain-specific exceptions. Pure domain layer, no infrastructure."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from scholarship_gate.domain.policy import AccessDecision


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when domain validation rules are violated."""


class InvalidStateTransitionError(DomainError):
    """Raised when a mutation attempt state transition is not allowed."""


class UnknownResourceError(DomainError):
    """Raised when a mutation names a table the gateway does not manage."""


class PolicyViolationError(DomainError):
    """
    Raised when the access policy denied a mutation attempt.
    Always recorded in the audit trail before being raised.
    """

    def __init__(self, decision: "AccessDecision", audit_id: Optional[int] = None) -> None:
        self.decision = decision
        self.audit_id = audit_id
        super().__init__(f"restricted: {decision.reason}")
