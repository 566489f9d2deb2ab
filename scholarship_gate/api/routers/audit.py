"""Audit API router: read-only time-window queries over the audit trail."""

from datetime import datetime
from typing import Annotated, Callable, List, Optional

from fastapi import APIRouter, Depends, Query

from scholarship_gate.api.dependencies import get_audit_query_service, get_clock
from scholarship_gate.config.settings import AppSettings, get_settings
from scholarship_gate.domain.schemas.mutation import AuditRecordResponse
from scholarship_gate.governance.audit_query import AuditQueryService

router = APIRouter()


@router.get("/", response_model=List[AuditRecordResponse])
async def list_audit_records(
    service: Annotated[AuditQueryService, Depends(get_audit_query_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
    days: Annotated[Optional[int], Query(ge=1)] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
):
    """
    Records in insertion order. With start (and optional end) returns that window;
    otherwise the last `days` days (default audit_lookback_days).
    """
    if start is not None:
        records = await service.between(start, end)
    else:
        records = await service.recent(days or settings.audit_lookback_days, now=clock())
    return [AuditRecordResponse.model_validate(r) for r in records]
