"""Governance-layer exceptions. Typed, no HTTP."""


class GovernanceError(Exception):
    """Base for all governance-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuditWriteFailureError(GovernanceError):
    """
    Raised when an audit record could not be durably appended.
    Fatal for the enclosing mutation attempt; never a policy denial.
    """
