# scholarship_gate/api/routers/health.py

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from scholarship_gate.api.dependencies import get_gateway
from scholarship_gate.application.gateway import ProtectedResourceGateway
from scholarship_gate.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(
    request: Request,
    gateway: Annotated[ProtectedResourceGateway, Depends(get_gateway)],
):
    """Health check plus the write window as the gateway would decide it right now (no audit)."""
    settings = get_settings()
    decision = gateway.check()
    return {
        "status": "ok",
        "actor": request.state.actor,
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "version": settings.version,
        "writes_allowed": decision.allowed,
        "restriction": decision.reason,
    }
