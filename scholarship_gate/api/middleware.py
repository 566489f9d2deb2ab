"""API middleware: correlation ID, actor context, per-request audit log line."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from scholarship_gate.core.context import actor_ctx, correlation_id_ctx
from scholarship_gate.domain.exceptions import DomainValidationError
from scholarship_gate.domain.validators import MAX_CORRELATION_ID_LENGTH, validate_actor

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Actor-ID"
CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Generate or preserve correlation ID; attach to request.state, response header, and logging
    context. Caller-supplied IDs are cut to the audit column width.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        supplied = (request.headers.get(CORRELATION_HEADER) or "").strip()
        correlation_id = supplied[:MAX_CORRELATION_ID_LENGTH] or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """Require a valid X-Actor-ID (400 otherwise); attach to request.state and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        actor = request.headers.get(ACTOR_HEADER)
        if not actor or not actor.strip():
            return JSONResponse(
                status_code=400,
                content={"detail": "X-Actor-ID header is required"},
            )
        try:
            validate_actor(actor)
        except DomainValidationError as e:
            return JSONResponse(status_code=400, content={"detail": f"X-Actor-ID: {e.message}"})
        request.state.actor = actor.strip()
        actor_ctx.set(request.state.actor)
        return await call_next(request)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """
    After response: log one request_audit line. For gateway calls it carries the audit_id
    the endpoint or error handler left on request.state, tying the HTTP request to its
    audit_log row.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        audit_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor": getattr(request.state, "actor", None),
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "audit_id": getattr(request.state, "audit_id", None),
        }
        logger.info(json.dumps(audit_event))
        return response
