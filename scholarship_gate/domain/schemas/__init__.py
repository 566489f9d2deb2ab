"""Domain schemas. Request/response and validation."""

from scholarship_gate.domain.schemas.mutation import (
    ApplicationStatusResponse,
    AuditRecordResponse,
    CalendarResponse,
    CalendarUpdateRequest,
    DeleteRequest,
    InsertRequest,
    MutationResponse,
    StudentResponse,
    UpdateRequest,
)

__all__ = [
    "ApplicationStatusResponse",
    "AuditRecordResponse",
    "CalendarResponse",
    "CalendarUpdateRequest",
    "DeleteRequest",
    "InsertRequest",
    "MutationResponse",
    "StudentResponse",
    "UpdateRequest",
]
