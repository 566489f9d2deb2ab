"""DB-backed resource repository. Runs one insert/update/delete statement per request."""

from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Mapping, Optional

from sqlalchemy import Table, delete, insert, update
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship_gate.domain.exceptions import DomainValidationError, UnknownResourceError
from scholarship_gate.domain.models.mutation import MutationKind, MutationRequest
from scholarship_gate.infrastructure.database.models import RESOURCE_MODELS


def _coerce(table: Table, name: str, value: Any) -> Any:
    """JSON carries dates as ISO strings; the Date/DateTime columns want Python objects."""
    if not isinstance(value, str):
        return value
    try:
        python_type = table.c[name].type.python_type
    except NotImplementedError:
        return value
    try:
        if python_type is datetime:
            return datetime.fromisoformat(value)
        if python_type is date:
            return date.fromisoformat(value)
    except ValueError as e:
        raise DomainValidationError(f"{table.name}.{name}: {e}") from e
    return value


def _bind(table: Table, columns: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(k for k in columns if k not in table.c)
    if unknown:
        raise DomainValidationError(f"Unknown column(s) for {table.name}: {', '.join(unknown)}")
    return {k: _coerce(table, k, v) for k, v in columns.items()}


class DbResourceRepository:
    """Implements ResourceRepository. Each statement runs in its own SAVEPOINT."""

    def __init__(self, session: AsyncSession, models: Optional[Mapping[str, type]] = None) -> None:
        self._session = session
        self._models = dict(models if models is not None else RESOURCE_MODELS)

    def resources(self) -> FrozenSet[str]:
        return frozenset(self._models)

    async def apply(self, request: MutationRequest) -> int:
        """Execute the statement; a failing statement leaves no row changes behind."""
        model = self._models.get(request.resource)
        if model is None:
            raise UnknownResourceError(f"Unknown resource: {request.resource}")
        table: Table = model.__table__

        if request.kind == MutationKind.INSERT:
            stmt = insert(table).values(**_bind(table, request.values))
        else:
            criteria = _bind(table, request.criteria)
            conditions = [table.c[k] == v for k, v in criteria.items()]
            if request.kind == MutationKind.UPDATE:
                stmt = update(table).where(*conditions).values(**_bind(table, request.values))
            else:
                stmt = delete(table).where(*conditions)

        async with self._session.begin_nested():
            result = await self._session.execute(stmt)
        return result.rowcount
