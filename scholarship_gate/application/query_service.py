"""Read-only eligibility and application-status queries. Never passes through the gateway."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentSummary:
    student_id: int
    name: str
    email: str
    gpa: float
    major: Optional[str] = None


class StudentQueryRepository(Protocol):
    """Read-side access to students, scholarships and applications."""

    async def eligible_students(self, scholarship_id: int) -> List[StudentSummary]:
        """Students meeting the scholarship's minimum GPA, best GPA first."""
        ...

    async def latest_application_status(
        self, student_id: int, scholarship_id: Optional[int] = None
    ) -> Optional[str]:
        """Status of the most recently submitted matching application, or None."""
        ...


class StudentQueryService:
    """Eligibility/status lookups. Performs no mutation."""

    def __init__(self, repository: StudentQueryRepository) -> None:
        self._repository = repository

    async def get_eligible_students(self, scholarship_id: int) -> List[StudentSummary]:
        students = await self._repository.eligible_students(scholarship_id)
        logger.info(
            "eligible_students_listed",
            extra={"scholarship_id": scholarship_id, "count": len(students)},
        )
        return students

    async def get_application_status(
        self, student_id: int, scholarship_id: Optional[int] = None
    ) -> Optional[str]:
        return await self._repository.latest_application_status(student_id, scholarship_id)
