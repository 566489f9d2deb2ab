"""Gateway tests: decision before the statement, exactly one audit record per attempt."""

import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from gateway_fakes import (
    HOLIDAY_SUNDAY,
    MONDAY,
    SATURDAY,
    FakeUnitOfWork,
    student_insert,
)
from scholarship_gate.application.exceptions import MutationFailedError
from scholarship_gate.application.gateway import ProtectedResourceGateway, _run_shielded
from scholarship_gate.domain.exceptions import (
    DomainValidationError,
    PolicyViolationError,
    UnknownResourceError,
)
from scholarship_gate.domain.models.mutation import MutationKind, MutationRequest
from scholarship_gate.domain.policy import DenialReason
from scholarship_gate.governance.exceptions import AuditWriteFailureError


def _seed_student(fake_db, student_id: int, **values):
    fake_db.tables["students"][student_id] = {
        "student_id": student_id,
        "name": f"Student {student_id}",
        "gpa": 3.0,
        **values,
    }


async def test_weekday_insert_denied_and_audited(gateway, fake_db):
    """Monday 2025-05-26: Deny (weekday), one audit record, no row inserted."""
    with pytest.raises(PolicyViolationError) as exc_info:
        await gateway.submit(student_insert(1), now=MONDAY)

    assert exc_info.value.message == "restricted: weekday"
    assert exc_info.value.decision.reasons == frozenset({DenialReason.WEEKDAY})
    assert fake_db.tables["students"] == {}
    assert [r.status for r in fake_db.audit] == ["Denied: weekday"]
    assert exc_info.value.audit_id == fake_db.audit[0].id
    assert fake_db.audit[0].operation == "INSERT students"
    assert fake_db.audit[0].actor == "registrar"


async def test_holiday_delete_denied_on_weekend(gateway, fake_db):
    """Sunday 2025-06-01 is a holiday: Deny (holiday), row stays."""
    _seed_student(fake_db, 7)
    request = MutationRequest(
        resource="students",
        kind=MutationKind.DELETE,
        actor="registrar",
        criteria={"student_id": 7},
    )
    with pytest.raises(PolicyViolationError) as exc_info:
        await gateway.submit(request, now=HOLIDAY_SUNDAY)

    assert exc_info.value.message == "restricted: holiday"
    assert 7 in fake_db.tables["students"]
    assert [r.status for r in fake_db.audit] == ["Denied: holiday"]
    assert fake_db.audit[0].operation == "DELETE students"


async def test_weekday_holiday_reports_both_reasons(gateway, fake_db, calendar):
    """Monday 2025-06-16 made a holiday: both predicates hold."""
    calendar.add(date(2025, 6, 16))
    with pytest.raises(PolicyViolationError):
        await gateway.submit(student_insert(1), now=datetime(2025, 6, 16, 9, 0, tzinfo=timezone.utc))
    assert [r.status for r in fake_db.audit] == ["Denied: weekday, holiday"]


async def test_weekend_update_allowed_and_applied(gateway, fake_db):
    """Saturday 2025-05-31, not a holiday: update applied, audit "Allowed"."""
    _seed_student(fake_db, 3)
    request = MutationRequest(
        resource="students",
        kind=MutationKind.UPDATE,
        actor="registrar",
        criteria={"student_id": 3},
        values={"gpa": 3.9},
    )
    result = await gateway.submit(request, now=SATURDAY)

    assert result.rows_affected == 1
    assert result.operation == "UPDATE students"
    assert fake_db.tables["students"][3]["gpa"] == 3.9
    assert [r.status for r in fake_db.audit] == ["Allowed"]
    assert result.audit_id == fake_db.audit[0].id
    assert fake_db.audit[0].timestamp == SATURDAY


async def test_allowed_statement_failure_is_audited(gateway, fake_db):
    """Duplicate key after Allow: statement fails, failure audited, no row change persisted."""
    await gateway.submit(student_insert(1, name="Original"), now=SATURDAY)

    with pytest.raises(MutationFailedError) as exc_info:
        await gateway.submit(student_insert(1, name="Duplicate"), now=SATURDAY)

    assert "UNIQUE constraint failed" in exc_info.value.message
    assert exc_info.value.cause is not None
    assert fake_db.tables["students"][1]["name"] == "Original"
    statuses = [r.status for r in fake_db.audit]
    assert statuses == [
        "Allowed",
        "Allowed but failed: UNIQUE constraint failed: students.student_id",
    ]
    assert exc_info.value.audit_id == fake_db.audit[1].id


async def test_audit_failure_aborts_allowed_mutation(gateway, fake_db):
    """If the audit write cannot land, the mutation must not commit."""
    fake_db.fail_audit = True
    with pytest.raises(AuditWriteFailureError):
        await gateway.submit(student_insert(1), now=SATURDAY)
    assert fake_db.tables["students"] == {}
    assert fake_db.audit == []


async def test_audit_failure_on_denied_attempt_is_not_policy_violation(gateway, fake_db):
    fake_db.fail_audit = True
    with pytest.raises(AuditWriteFailureError) as exc_info:
        await gateway.submit(student_insert(1), now=MONDAY)
    assert not isinstance(exc_info.value, PolicyViolationError)


async def test_commit_failure_recorded_as_failed(gateway, fake_db):
    """Commit fails after the statement ran: one "Allowed but failed" record, no row."""
    fake_db.fail_commits = 1
    with pytest.raises(MutationFailedError) as exc_info:
        await gateway.submit(student_insert(1), now=SATURDAY)

    assert exc_info.value.message == "could not serialize access"
    assert fake_db.tables["students"] == {}
    assert [r.status for r in fake_db.audit] == ["Allowed but failed: could not serialize access"]


async def test_cancellation_after_allow_audited_as_canceled(gateway, fake_db):
    fake_db.apply_delay = 10
    task = asyncio.create_task(gateway.submit(student_insert(1), now=SATURDAY))
    await fake_db.apply_started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert fake_db.tables["students"] == {}
    assert [r.status for r in fake_db.audit] == ["Allowed but failed: canceled"]


async def test_one_evaluation_per_statement_not_per_row(gateway, fake_db, metrics):
    for sid in (1, 2, 3):
        _seed_student(fake_db, sid, gpa=3.0)
    request = MutationRequest(
        resource="students",
        kind=MutationKind.UPDATE,
        actor="registrar",
        criteria={"gpa": 3.0},
        values={"major": "Physics"},
    )
    result = await gateway.submit(request, now=SATURDAY)

    assert result.rows_affected == 3
    assert len(fake_db.audit) == 1
    labels = metrics.export_metrics()["counters_by_labels"]["gateway_decisions"]
    assert labels == {"gateway_decisions:outcome=allow,resource=students": 1}


async def test_unprotected_resource_bypasses_policy_and_audit(gateway, fake_db):
    request = MutationRequest(
        resource="scholarships",
        kind=MutationKind.INSERT,
        actor="registrar",
        values={"scholarship_id": 10, "name": "Merit"},
    )
    result = await gateway.submit(request, now=MONDAY)

    assert result.rows_affected == 1
    assert result.audit_id is None
    assert 10 in fake_db.tables["scholarships"]
    assert fake_db.audit == []


async def test_unknown_resource_rejected_without_audit(gateway, fake_db):
    request = MutationRequest(
        resource="grades",
        kind=MutationKind.INSERT,
        actor="registrar",
        values={"id": 1},
    )
    with pytest.raises(UnknownResourceError):
        await gateway.submit(request, now=SATURDAY)
    assert fake_db.audit == []


async def test_malformed_request_rejected_before_evaluation(gateway, fake_db):
    request = MutationRequest(
        resource="students",
        kind=MutationKind.DELETE,
        actor="registrar",
    )
    with pytest.raises(DomainValidationError):
        await gateway.submit(request, now=MONDAY)
    assert fake_db.audit == []


async def test_policy_timezone_decides_the_local_day(fake_db, calendar):
    """Friday 20:00 UTC is already Saturday at UTC+9."""
    gateway = ProtectedResourceGateway(
        lambda: FakeUnitOfWork(fake_db),
        calendar,
        known_resources=["students"],
        policy_tz=timezone(timedelta(hours=9)),
    )
    friday_evening = datetime(2025, 5, 30, 20, 0, tzinfo=timezone.utc)
    result = await gateway.submit(student_insert(1), now=friday_evening)
    assert result.rows_affected == 1
    assert [r.status for r in fake_db.audit] == ["Allowed"]


async def test_clock_used_when_now_not_given(fake_db, calendar):
    gateway = ProtectedResourceGateway(
        lambda: FakeUnitOfWork(fake_db),
        calendar,
        known_resources=["students"],
        clock=lambda: MONDAY,
    )
    assert gateway.check().denied
    with pytest.raises(PolicyViolationError):
        await gateway.submit(student_insert(1))
    assert fake_db.audit[0].timestamp == MONDAY


async def test_concurrent_attempts_each_audited_once(gateway, fake_db):
    """100 simultaneous attempts, mixed allow/deny: 100 records, unique ids, matching statuses."""
    fake_db.apply_delay = 0

    async def attempt(i: int):
        now = SATURDAY if i % 2 == 0 else MONDAY
        try:
            await gateway.submit(student_insert(i, actor=f"user-{i}"), now=now)
        except PolicyViolationError:
            pass

    await asyncio.gather(*(attempt(i) for i in range(100)))

    assert len(fake_db.audit) == 100
    ids = [r.id for r in fake_db.audit]
    assert len(set(ids)) == 100
    assert sorted(ids) == ids
    for record in fake_db.audit:
        i = int(record.actor.split("-")[1])
        expected = "Allowed" if i % 2 == 0 else "Denied: weekday"
        assert record.status == expected
    assert sorted(fake_db.tables["students"]) == list(range(0, 100, 2))


async def test_failed_rollback_still_audits_statement_failure(gateway, fake_db, caplog):
    """Connection drops during rollback of a failed statement: the failure is still recorded."""
    await gateway.submit(student_insert(1), now=SATURDAY)
    fake_db.fail_rollbacks = 1

    with pytest.raises(MutationFailedError) as exc_info:
        await gateway.submit(student_insert(1), now=SATURDAY)

    assert "UNIQUE constraint failed" in exc_info.value.message
    assert [r.status for r in fake_db.audit] == [
        "Allowed",
        "Allowed but failed: UNIQUE constraint failed: students.student_id",
    ]
    assert any(r.getMessage() == "rollback_failed" for r in caplog.records)


async def test_failed_rollback_after_commit_failure_still_audited(gateway, fake_db):
    fake_db.fail_commits = 1
    fake_db.fail_rollbacks = 1
    with pytest.raises(MutationFailedError):
        await gateway.submit(student_insert(1), now=SATURDAY)
    assert fake_db.tables["students"] == {}
    assert [r.status for r in fake_db.audit] == ["Allowed but failed: could not serialize access"]


async def test_failed_rollback_after_audit_failure_keeps_audit_error(gateway, fake_db, caplog):
    fake_db.fail_audit = True
    fake_db.fail_rollbacks = 1
    with pytest.raises(AuditWriteFailureError):
        await gateway.submit(student_insert(1), now=SATURDAY)
    assert fake_db.tables["students"] == {}
    assert any(r.getMessage() == "attempt_unaudited" for r in caplog.records)


async def test_overlong_actor_rejected_before_evaluation(gateway, fake_db):
    with pytest.raises(DomainValidationError):
        await gateway.submit(student_insert(1, actor="a" * 200), now=MONDAY)
    assert fake_db.audit == []


async def test_shielded_failure_logged_when_caller_cancelled(caplog):
    started = asyncio.Event()

    async def audit_write():
        started.set()
        await asyncio.sleep(0.01)
        raise ConnectionError("audit store unavailable")

    outer = asyncio.create_task(_run_shielded(audit_write()))
    await started.wait()
    outer.cancel()

    with pytest.raises(asyncio.CancelledError):
        await outer
    assert any(r.getMessage() == "shielded_task_failed" for r in caplog.records)
