"""Domain models. Pure business entities."""

from scholarship_gate.domain.models.mutation import (
    GatewayState,
    MutationAttempt,
    MutationKind,
    MutationRequest,
    MutationResult,
)

__all__ = [
    "GatewayState",
    "MutationAttempt",
    "MutationKind",
    "MutationRequest",
    "MutationResult",
]
