"""Read-only eligibility and status queries. Not routed through the gateway."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends

from scholarship_gate.api.dependencies import get_query_service
from scholarship_gate.application.query_service import StudentQueryService
from scholarship_gate.domain.schemas.mutation import ApplicationStatusResponse, StudentResponse

router = APIRouter()


@router.get("/students/eligible", response_model=List[StudentResponse])
async def eligible_students(
    scholarship_id: int,
    service: Annotated[StudentQueryService, Depends(get_query_service)],
):
    students = await service.get_eligible_students(scholarship_id)
    return [StudentResponse.model_validate(s) for s in students]


@router.get("/applications/status", response_model=ApplicationStatusResponse)
async def application_status(
    student_id: int,
    service: Annotated[StudentQueryService, Depends(get_query_service)],
    scholarship_id: Optional[int] = None,
):
    status = await service.get_application_status(student_id, scholarship_id)
    return ApplicationStatusResponse(
        student_id=student_id,
        scholarship_id=scholarship_id,
        status=status,
    )
