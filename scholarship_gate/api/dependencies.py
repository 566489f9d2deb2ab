"""FastAPI dependency injection: sessions, calendar, gateway, services, actor, correlation_id."""

import logging
from datetime import datetime, timezone
from typing import Annotated, AsyncIterator, Callable
from zoneinfo import ZoneInfo

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scholarship_gate.application.calendar_service import CalendarService
from scholarship_gate.application.gateway import ProtectedResourceGateway
from scholarship_gate.application.query_service import StudentQueryService
from scholarship_gate.config.settings import AppSettings, get_settings
from scholarship_gate.domain.calendar import CalendarStore, HolidayScope
from scholarship_gate.governance.audit_query import AuditQueryService
from scholarship_gate.infrastructure.database import session as db_session
from scholarship_gate.infrastructure.database.audit_repository_db import DbAuditRepository
from scholarship_gate.infrastructure.database.holiday_repository_db import DbHolidayRepository
from scholarship_gate.infrastructure.database.models import RESOURCE_MODELS
from scholarship_gate.infrastructure.database.query_repository_db import DbStudentQueryRepository
from scholarship_gate.infrastructure.database.unit_of_work_db import SqlUnitOfWorkFactory
from scholarship_gate.observability.metrics import MetricsCollector

_calendar_store: CalendarStore | None = None
_metrics: MetricsCollector | None = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory."""
    return db_session.AsyncSessionLocal


def get_calendar_store() -> CalendarStore:
    """Return singleton calendar store seeded from settings."""
    global _calendar_store
    if _calendar_store is None:
        settings = get_settings()
        _calendar_store = CalendarStore(
            settings.holiday_dates,
            scope=HolidayScope.parse(settings.holiday_scope),
        )
    return _calendar_store


def get_metrics() -> MetricsCollector:
    """Return singleton metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_clock() -> Callable[[], datetime]:
    """Source of the attempt instant. Overridden in tests."""
    return lambda: datetime.now(timezone.utc)


async def get_db(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def get_gateway(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    calendar: Annotated[CalendarStore, Depends(get_calendar_store)],
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> ProtectedResourceGateway:
    """Build the gateway over SQL units of work and the shared calendar."""
    return ProtectedResourceGateway(
        SqlUnitOfWorkFactory(session_factory),
        calendar,
        known_resources=RESOURCE_MODELS.keys(),
        protected_resources=settings.protected_resources,
        clock=clock,
        policy_tz=ZoneInfo(settings.policy_timezone),
        metrics=metrics,
        logger=logging.getLogger("scholarship_gate.gateway"),
        status_max_length=settings.audit_status_max_length,
    )


def get_audit_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuditQueryService:
    return AuditQueryService(DbAuditRepository(db))


def get_calendar_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    calendar: Annotated[CalendarStore, Depends(get_calendar_store)],
) -> CalendarService:
    return CalendarService(calendar, DbHolidayRepository(db))


def get_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudentQueryService:
    return StudentQueryService(DbStudentQueryRepository(db))


def get_actor(request: Request) -> str:
    """Extract actor from request.state (set by middleware)."""
    return request.state.actor


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
