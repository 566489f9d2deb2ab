"""Domain validators. Pure validation functions."""

from scholarship_gate.domain.validators.mutation_validator import (
    MAX_ACTOR_LENGTH,
    MAX_CORRELATION_ID_LENGTH,
    validate_actor,
    validate_mutation_request,
    validate_time_window,
)

__all__ = [
    "MAX_ACTOR_LENGTH",
    "MAX_CORRELATION_ID_LENGTH",
    "validate_actor",
    "validate_mutation_request",
    "validate_time_window",
]
