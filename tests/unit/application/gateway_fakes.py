"""In-memory database, unit of work and fixed instants for gateway tests."""

import asyncio
from datetime import datetime, timezone

from scholarship_gate.domain.models.mutation import MutationKind, MutationRequest
from scholarship_gate.governance.audit_models import AuditEntry, AuditRecord

MONDAY = datetime(2025, 5, 26, 10, 0, tzinfo=timezone.utc)
SATURDAY = datetime(2025, 5, 31, 10, 0, tzinfo=timezone.utc)
HOLIDAY_SUNDAY = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)


class FakeIntegrityError(Exception):
    """Stands in for a driver constraint error."""


class FakeDatabase:
    """In-memory tables keyed by primary key, plus the audit trail. Shared by all units of work."""

    def __init__(self, primary_keys: dict[str, str]) -> None:
        self.primary_keys = primary_keys
        self.tables: dict[str, dict] = {name: {} for name in primary_keys}
        self.audit: list[AuditRecord] = []
        self._next_audit_id = 1
        self.fail_audit = False
        self.fail_commits = 0
        self.fail_rollbacks = 0
        self.apply_delay = 0.0
        self.apply_started = asyncio.Event()

    def next_audit_id(self) -> int:
        audit_id = self._next_audit_id
        self._next_audit_id += 1
        return audit_id


class FakeResourceRepository:
    def __init__(self, db: FakeDatabase, uow: "FakeUnitOfWork") -> None:
        self._db = db
        self._uow = uow

    def resources(self):
        return frozenset(self._db.tables)

    async def apply(self, request: MutationRequest) -> int:
        self._db.apply_started.set()
        await asyncio.sleep(self._db.apply_delay)
        table = self._db.tables[request.resource]
        pk = self._db.primary_keys[request.resource]
        if request.kind == MutationKind.INSERT:
            key = request.values[pk]
            if key in table or any(
                payload[1].get(pk) == key for op, payload in self._uow.staged if op == "insert"
            ):
                raise FakeIntegrityError(f"UNIQUE constraint failed: {request.resource}.{pk}")
            self._uow.staged.append(("insert", (request.resource, dict(request.values))))
            return 1
        matches = [
            k for k, row in table.items()
            if all(row.get(c) == v for c, v in request.criteria.items())
        ]
        op = "update" if request.kind == MutationKind.UPDATE else "delete"
        self._uow.staged.append((op, (request.resource, matches, dict(request.values))))
        return len(matches)


class FakeAuditRepository:
    def __init__(self, db: FakeDatabase, uow: "FakeUnitOfWork") -> None:
        self._db = db
        self._uow = uow

    async def append(self, entry: AuditEntry) -> AuditRecord:
        if self._db.fail_audit:
            raise ConnectionError("audit store unavailable")
        record = AuditRecord(
            id=self._db.next_audit_id(),
            actor=entry.actor,
            timestamp=entry.timestamp,
            operation=entry.operation,
            status=entry.status,
            correlation_id=entry.correlation_id,
        )
        self._uow.staged.append(("audit", record))
        return record

    async def list_between(self, start, end=None):
        return [
            r for r in self._db.audit
            if r.timestamp >= start and (end is None or r.timestamp <= end)
        ]


class FakeUnitOfWork:
    """Stages changes; commit applies them to the shared FakeDatabase."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db
        self.staged: list = []
        self.resources = FakeResourceRepository(db, self)
        self.audit = FakeAuditRepository(db, self)
        self.committed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.staged.clear()

    async def commit(self) -> None:
        if self._db.fail_commits > 0:
            self._db.fail_commits -= 1
            self.staged.clear()
            raise RuntimeError("could not serialize access")
        for op, payload in self.staged:
            if op == "audit":
                self._db.audit.append(payload)
            elif op == "insert":
                resource, row = payload
                self._db.tables[resource][row[self._db.primary_keys[resource]]] = row
            elif op == "update":
                resource, keys, values = payload
                for k in keys:
                    self._db.tables[resource][k].update(values)
            elif op == "delete":
                resource, keys, _ = payload
                for k in keys:
                    self._db.tables[resource].pop(k, None)
        self.staged.clear()
        self.committed = True

    async def rollback(self) -> None:
        self.staged.clear()
        if self._db.fail_rollbacks > 0:
            self._db.fail_rollbacks -= 1
            raise ConnectionResetError("connection reset by peer")


def student_insert(student_id: int = 1, actor: str = "registrar", **values) -> MutationRequest:
    row = {"student_id": student_id, "name": f"Student {student_id}", "gpa": 3.5, **values}
    return MutationRequest(
        resource="students",
        kind=MutationKind.INSERT,
        actor=actor,
        values=row,
        correlation_id=f"corr-{student_id}",
    )
