# Application layer: gateway and query services that orchestrate domain, governance and infrastructure.

from scholarship_gate.application.calendar_service import CalendarService, HolidayRepository
from scholarship_gate.application.exceptions import ApplicationError, MutationFailedError
from scholarship_gate.application.gateway import ProtectedResourceGateway
from scholarship_gate.application.query_service import StudentQueryService, StudentSummary
from scholarship_gate.application.unit_of_work import (
    ResourceRepository,
    UnitOfWork,
    UnitOfWorkFactory,
)

__all__ = [
    "ApplicationError",
    "CalendarService",
    "HolidayRepository",
    "MutationFailedError",
    "ProtectedResourceGateway",
    "ResourceRepository",
    "StudentQueryService",
    "StudentSummary",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
