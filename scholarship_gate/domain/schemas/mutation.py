"""Pydantic schemas for the gateway, audit and calendar APIs. No DB or infrastructure."""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


def _must_be_json_serializable(v: Dict[str, Any]) -> Dict[str, Any]:
    try:
        json.dumps(v)
    except (TypeError, ValueError) as e:
        raise ValueError("column values must be JSON-serializable") from e
    return v


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class InsertRequest(BaseModel):
    """Insert one row. Keys are column names."""

    values: Dict[str, Any] = Field(..., min_length=1)

    @field_validator("values")
    @classmethod
    def json_serializable(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _must_be_json_serializable(v)


class UpdateRequest(BaseModel):
    """Update rows matching every criteria column."""

    criteria: Dict[str, Any] = Field(..., min_length=1)
    values: Dict[str, Any] = Field(..., min_length=1)

    @field_validator("criteria", "values")
    @classmethod
    def json_serializable(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _must_be_json_serializable(v)


class DeleteRequest(BaseModel):
    """Delete rows matching every criteria column."""

    criteria: Dict[str, Any] = Field(..., min_length=1)

    @field_validator("criteria")
    @classmethod
    def json_serializable(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _must_be_json_serializable(v)


class CalendarUpdateRequest(BaseModel):
    dates: List[date] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MutationResponse(BaseModel):
    resource: str
    operation: str
    rows_affected: int
    audit_id: Optional[int] = None

    model_config = {"from_attributes": True}


class AuditRecordResponse(BaseModel):
    id: int
    actor: str
    timestamp: datetime
    operation: str
    status: str
    correlation_id: Optional[str] = None

    model_config = {"from_attributes": True}


class CalendarResponse(BaseModel):
    dates: List[date]
    scope: Optional[str] = None


class StudentResponse(BaseModel):
    student_id: int
    name: str
    email: str
    gpa: float
    major: Optional[str] = None

    model_config = {"from_attributes": True}


class ApplicationStatusResponse(BaseModel):
    student_id: int
    scholarship_id: Optional[int] = None
    status: Optional[str] = None
