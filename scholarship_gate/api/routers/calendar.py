"""Calendar API router: administrative view and edits of restricted dates. Not gated, not audited."""

from typing import Annotated

from fastapi import APIRouter, Depends

from scholarship_gate.api.dependencies import get_calendar_service
from scholarship_gate.application.calendar_service import CalendarService
from scholarship_gate.config.settings import AppSettings, get_settings
from scholarship_gate.domain.schemas.mutation import CalendarResponse, CalendarUpdateRequest

router = APIRouter()


@router.get("/", response_model=CalendarResponse)
async def get_calendar(
    service: Annotated[CalendarService, Depends(get_calendar_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
):
    return CalendarResponse(dates=service.list_dates(), scope=settings.holiday_scope)


@router.post("/", response_model=CalendarResponse)
async def add_dates(
    body: CalendarUpdateRequest,
    service: Annotated[CalendarService, Depends(get_calendar_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
):
    dates = await service.add_dates(body.dates)
    return CalendarResponse(dates=dates, scope=settings.holiday_scope)


@router.delete("/", response_model=CalendarResponse)
async def remove_dates(
    body: CalendarUpdateRequest,
    service: Annotated[CalendarService, Depends(get_calendar_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
):
    dates = await service.remove_dates(body.dates)
    return CalendarResponse(dates=dates, scope=settings.holiday_scope)
