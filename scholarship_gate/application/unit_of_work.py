"""Unit-of-work protocols. Application layer depends on these; infrastructure implements them."""

from typing import Callable, FrozenSet, Protocol

from scholarship_gate.domain.models.mutation import MutationRequest
from scholarship_gate.governance.audit_repository import AuditRepository


class ResourceRepository(Protocol):
    """Applies one statement to a table."""

    def resources(self) -> FrozenSet[str]:
        """Names of the tables this repository can mutate."""
        ...

    async def apply(self, request: MutationRequest) -> int:
        """
        Execute the statement and return rows affected.
        On error the statement's own row changes are undone before raising.
        """
        ...


class UnitOfWork(Protocol):
    """
    One transaction spanning resource changes and audit appends.
    Leaving the context without commit() rolls everything back.
    """

    resources: ResourceRepository
    audit: AuditRepository

    async def __aenter__(self) -> "UnitOfWork":
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
