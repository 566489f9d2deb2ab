"""Validators for mutation requests. Pure functions, no infrastructure or DB access."""

from datetime import datetime
from typing import Optional

from scholarship_gate.domain.exceptions import DomainValidationError
from scholarship_gate.domain.models.mutation import MutationKind, MutationRequest

# Widths of the audit_log actor and correlation_id columns
MAX_ACTOR_LENGTH = 128
MAX_CORRELATION_ID_LENGTH = 64


def validate_actor(actor: str) -> None:
    """Actor identity must be non-empty and fit the audit column. Raises DomainValidationError."""
    if not actor or not actor.strip():
        raise DomainValidationError("actor must not be empty")
    if len(actor.strip()) > MAX_ACTOR_LENGTH:
        raise DomainValidationError(f"actor must be at most {MAX_ACTOR_LENGTH} characters")


def validate_mutation_request(request: MutationRequest) -> None:
    """
    Insert needs values; update needs criteria and values; delete needs criteria.
    Unfiltered update/delete is rejected.
    """
    validate_actor(request.actor)
    if request.correlation_id and len(request.correlation_id) > MAX_CORRELATION_ID_LENGTH:
        raise DomainValidationError(
            f"correlation_id must be at most {MAX_CORRELATION_ID_LENGTH} characters"
        )
    if not request.resource or not request.resource.strip():
        raise DomainValidationError("resource must not be empty")
    if request.kind == MutationKind.INSERT:
        if not request.values:
            raise DomainValidationError("insert requires at least one column value")
        if request.criteria:
            raise DomainValidationError("insert does not take criteria")
    elif request.kind == MutationKind.UPDATE:
        if not request.criteria:
            raise DomainValidationError("update requires criteria")
        if not request.values:
            raise DomainValidationError("update requires at least one column value")
    elif request.kind == MutationKind.DELETE:
        if not request.criteria:
            raise DomainValidationError("delete requires criteria")
        if request.values:
            raise DomainValidationError("delete does not take column values")


def validate_time_window(start: datetime, end: Optional[datetime]) -> None:
    """Audit query window must not be inverted."""
    if end is not None and end < start:
        raise DomainValidationError("end must not be earlier than start")
