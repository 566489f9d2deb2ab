# scholarship_gate/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from scholarship_gate.api.dependencies import get_calendar_store
from scholarship_gate.api.middleware import (
    ActorContextMiddleware,
    AuditTriggerMiddleware,
    CorrelationIdMiddleware,
)
from scholarship_gate.api.routers import audit, calendar, health, mutations, queries
from scholarship_gate.application.calendar_service import CalendarService
from scholarship_gate.application.exceptions import ApplicationError, MutationFailedError
from scholarship_gate.config.logging import configure_logging
from scholarship_gate.config.settings import get_settings
from scholarship_gate.domain.exceptions import (
    DomainError,
    DomainValidationError,
    PolicyViolationError,
    UnknownResourceError,
)
from scholarship_gate.governance.exceptions import AuditWriteFailureError, GovernanceError
from scholarship_gate.infrastructure.database.holiday_repository_db import DbHolidayRepository
from scholarship_gate.infrastructure.database.session import AsyncSessionLocal, engine, init_db

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and merge persisted holidays into the calendar store."""
    await init_db(engine)
    async with AsyncSessionLocal() as session:
        await CalendarService(get_calendar_store(), DbHolidayRepository(session)).load()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(PolicyViolationError)
async def policy_violation_handler(request, exc: PolicyViolationError):
    request.state.audit_id = exc.audit_id
    return JSONResponse(
        status_code=403,
        content={
            "detail": exc.message,
            "reasons": sorted(r.value for r in exc.decision.reasons),
            "audit_id": exc.audit_id,
        },
    )


@app.exception_handler(UnknownResourceError)
async def unknown_resource_handler(request, exc: UnknownResourceError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(MutationFailedError)
async def mutation_failed_handler(request, exc: MutationFailedError):
    request.state.audit_id = exc.audit_id
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message, "audit_id": exc.audit_id},
    )


@app.exception_handler(AuditWriteFailureError)
async def audit_write_failure_handler(request, exc: AuditWriteFailureError):
    logger.error("audit_write_failure", extra={"error": exc.message})
    return JSONResponse(status_code=503, content={"detail": "Audit trail unavailable; mutation aborted"})


@app.exception_handler(GovernanceError)
async def governance_error_handler(request, exc: GovernanceError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.error("unexpected_error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /mutations, /audit, /calendar, /students, /applications
app.include_router(health.router)
app.include_router(mutations.router, prefix="/mutations")
app.include_router(audit.router, prefix="/audit")
app.include_router(calendar.router, prefix="/calendar")
app.include_router(queries.router)
