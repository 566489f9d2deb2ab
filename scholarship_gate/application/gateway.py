"""
Protected-resource gateway. The single enforcement point for writes to protected tables.

Per statement (not per row):
  1. capture now and actor;
  2. evaluate the access policy once;
  3. Deny: write "Denied: <reason>" and raise PolicyViolationError, no row is touched;
  4. Allow: run the statement, then write exactly one audit record,
     "Allowed" on success or "Allowed but failed: <detail>" on failure.

The "Allowed" record is written in the same unit of work as the statement, so a failed
audit write aborts the mutation. Denied and failed records are written in their own unit
of work so they survive the statement's rollback. Audit writes are shielded from
cancellation.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone, tzinfo
from typing import Awaitable, Callable, FrozenSet, Iterable, NoReturn, Optional, TypeVar

from scholarship_gate.application.exceptions import MutationFailedError
from scholarship_gate.application.unit_of_work import UnitOfWork, UnitOfWorkFactory
from scholarship_gate.domain.calendar import CalendarStore
from scholarship_gate.domain.exceptions import PolicyViolationError, UnknownResourceError
from scholarship_gate.domain.models.mutation import (
    GatewayState,
    MutationAttempt,
    MutationRequest,
    MutationResult,
)
from scholarship_gate.domain.policy import AccessDecision, evaluate
from scholarship_gate.domain.validators import validate_mutation_request
from scholarship_gate.governance.audit_logger import AuditRecorder
from scholarship_gate.governance.audit_models import CANCELED_DETAIL, AuditRecord, AuditStatus
from scholarship_gate.governance.exceptions import AuditWriteFailureError
from scholarship_gate.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def failure_detail(exc: BaseException) -> str:
    """Driver message for DB errors (SQLAlchemy keeps it on .orig), else str(exc)."""
    orig = getattr(exc, "orig", None)
    text = str(orig) if orig is not None else str(exc)
    return text.strip() or type(exc).__name__


async def _run_shielded(coro: Awaitable[T]) -> T:
    """
    Run coro to completion even if the caller is cancelled.
    On cancellation wait for coro to finish, log its failure if any, then re-raise
    CancelledError.
    """
    task = asyncio.ensure_future(coro)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        if not task.done():
            await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            logger.error("shielded_task_failed", exc_info=task.exception())
        raise


class ProtectedResourceGateway:
    """
    Wraps every insert/update/delete on protected tables with the policy check and audit.
    Tables outside protected_resources are applied directly, without policy or audit.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        calendar: CalendarStore,
        *,
        known_resources: Iterable[str],
        protected_resources: Optional[Iterable[str]] = None,
        clock: Clock = _utc_now,
        policy_tz: Optional[tzinfo] = None,
        metrics: Optional[MetricsCollector] = None,
        logger: Optional[logging.Logger] = None,
        status_max_length: Optional[int] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._calendar = calendar
        self._known: FrozenSet[str] = frozenset(known_resources)
        self._protected: FrozenSet[str] = (
            self._known if protected_resources is None else frozenset(protected_resources)
        )
        self._clock = clock
        self._tz = policy_tz
        self._metrics = metrics or MetricsCollector()
        self._logger = logger or logging.getLogger(__name__)
        self._status_max_length = status_max_length

    def is_protected(self, resource: str) -> bool:
        return resource in self._protected

    def check(self, now: Optional[datetime] = None) -> AccessDecision:
        """Evaluate the policy without attempting anything (no audit)."""
        return evaluate(now or self._clock(), self._calendar, self._tz)

    async def submit(
        self,
        request: MutationRequest,
        *,
        now: Optional[datetime] = None,
    ) -> MutationResult:
        """
        Process one mutation attempt.
        Raises PolicyViolationError on Deny, MutationFailedError when an allowed statement
        fails, AuditWriteFailureError when the audit trail cannot be written.
        """
        validate_mutation_request(request)
        if request.resource not in self._known:
            raise UnknownResourceError(f"Unknown resource: {request.resource}")
        if not self.is_protected(request.resource):
            return await self._apply_unprotected(request)

        started = time.perf_counter()
        now = now or self._clock()
        attempt = MutationAttempt(request=request, started_at=now)
        try:
            decision = evaluate(now, self._calendar, self._tz)
            self._logger.info(
                "policy_evaluated",
                extra={
                    "operation": request.operation,
                    "outcome": decision.outcome.value,
                    "reason": decision.reason,
                },
            )
            self._metrics.increment(
                "gateway_decisions", outcome=decision.outcome.value, resource=request.resource
            )
            if decision.denied:
                attempt.transition_to(GatewayState.EVALUATED_DENY)
                await self._deny(attempt, decision)
            attempt.transition_to(GatewayState.EVALUATED_ALLOW)
            return await self._execute(attempt)
        finally:
            if not attempt.is_terminal:
                self._logger.error(
                    "attempt_unaudited",
                    extra={"operation": request.operation, "state": attempt.state.value},
                )
            self._metrics.observe_latency(
                "gateway_latency_ms",
                (time.perf_counter() - started) * 1000,
                resource=request.resource,
            )

    # ------------------------------------------------------------------
    # Deny path
    # ------------------------------------------------------------------

    async def _deny(self, attempt: MutationAttempt, decision: AccessDecision) -> NoReturn:
        request = attempt.request
        record = await self._record_detached(attempt, AuditStatus.denied(decision.reason))
        attempt.transition_to(GatewayState.AUDITED)
        self._logger.warning(
            "mutation_denied",
            extra={"operation": request.operation, "reason": decision.reason, "audit_id": record.id},
        )
        raise PolicyViolationError(decision, audit_id=record.id)

    # ------------------------------------------------------------------
    # Allow path
    # ------------------------------------------------------------------

    async def _execute(self, attempt: MutationAttempt) -> MutationResult:
        request = attempt.request
        async with self._uow_factory() as uow:
            try:
                rows = await uow.resources.apply(request)
            except asyncio.CancelledError:
                await self._rollback_quietly(uow, request)
                await self._fail(attempt, CANCELED_DETAIL)
                raise
            except Exception as exc:
                await self._rollback_quietly(uow, request)
                detail = failure_detail(exc)
                record = await self._fail(attempt, detail)
                raise MutationFailedError(detail, cause=exc, audit_id=record.id) from exc

            attempt.transition_to(GatewayState.COMMITTED)
            return await _run_shielded(self._finalize(uow, attempt, rows))

    async def _finalize(self, uow: UnitOfWork, attempt: MutationAttempt, rows: int) -> MutationResult:
        """Write the "Allowed" record alongside the statement, then commit both."""
        request = attempt.request
        recorder = AuditRecorder(uow.audit, self._logger)
        try:
            record = await recorder.record(
                actor=request.actor,
                operation=request.operation,
                status=AuditStatus.allowed(),
                timestamp=attempt.started_at,
                correlation_id=request.correlation_id,
            )
        except AuditWriteFailureError:
            await self._rollback_quietly(uow, request)
            self._logger.error("mutation_aborted_audit_failure", extra={"operation": request.operation})
            raise

        try:
            await uow.commit()
        except Exception as exc:
            await self._rollback_quietly(uow, request)
            detail = failure_detail(exc)
            failed = await self._record_detached(attempt, AuditStatus.failed(detail, self._status_max_length))
            attempt.transition_to(GatewayState.AUDITED)
            self._logger.error(
                "mutation_commit_failed",
                extra={"operation": request.operation, "error": detail, "audit_id": failed.id},
            )
            raise MutationFailedError(detail, cause=exc, audit_id=failed.id) from exc

        attempt.transition_to(GatewayState.AUDITED)
        self._logger.info(
            "mutation_applied",
            extra={"operation": request.operation, "rows_affected": rows, "audit_id": record.id},
        )
        return MutationResult(
            resource=request.resource,
            operation=request.operation,
            rows_affected=rows,
            audit_id=record.id,
        )

    async def _fail(self, attempt: MutationAttempt, detail: str) -> AuditRecord:
        attempt.transition_to(GatewayState.FAILED)
        record = await self._record_detached(attempt, AuditStatus.failed(detail, self._status_max_length))
        attempt.transition_to(GatewayState.AUDITED)
        self._logger.error(
            "mutation_failed",
            extra={"operation": attempt.request.operation, "error": detail, "audit_id": record.id},
        )
        return record

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _rollback_quietly(self, uow: UnitOfWork, request: MutationRequest) -> None:
        """Roll back; a failing rollback is logged so the attempt can still be audited."""
        try:
            await uow.rollback()
        except Exception as e:
            self._logger.error(
                "rollback_failed",
                extra={"operation": request.operation, "error": failure_detail(e)},
            )

    async def _record_detached(self, attempt: MutationAttempt, status: str) -> AuditRecord:
        """Write one audit record in its own unit of work, independent of the statement."""
        request = attempt.request

        async def _write() -> AuditRecord:
            async with self._uow_factory() as uow:
                record = await AuditRecorder(uow.audit, self._logger).record(
                    actor=request.actor,
                    operation=request.operation,
                    status=status,
                    timestamp=attempt.started_at,
                    correlation_id=request.correlation_id,
                )
                try:
                    await uow.commit()
                except Exception as e:
                    raise AuditWriteFailureError(f"Audit commit failed: {e}") from e
                return record

        return await _run_shielded(_write())

    async def _apply_unprotected(self, request: MutationRequest) -> MutationResult:
        async with self._uow_factory() as uow:
            rows = await uow.resources.apply(request)
            await uow.commit()
        self._logger.info(
            "mutation_applied_unprotected",
            extra={"operation": request.operation, "rows_affected": rows},
        )
        return MutationResult(
            resource=request.resource,
            operation=request.operation,
            rows_affected=rows,
        )
