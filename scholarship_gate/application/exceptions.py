"""Application-layer exceptions. Do not reuse domain exceptions."""

from typing import Optional


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MutationFailedError(ApplicationError):
    """
    Raised when an allowed statement failed for reasons unrelated to policy
    (constraint violation, cancellation, commit failure). The audit trail already holds
    an "Allowed but failed" record; cause is the original exception.
    """

    def __init__(
        self,
        detail: str,
        *,
        cause: Optional[BaseException] = None,
        audit_id: Optional[int] = None,
    ) -> None:
        self.detail = detail
        self.cause = cause
        self.audit_id = audit_id
        super().__init__(detail)
