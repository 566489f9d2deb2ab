"""DB-backed read queries for eligibility and application status."""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scholarship_gate.application.query_service import StudentSummary
from scholarship_gate.infrastructure.database.models import Application, Scholarship, Student


class DbStudentQueryRepository:
    """Implements StudentQueryRepository with plain joins and a window function."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def eligible_students(self, scholarship_id: int) -> List[StudentSummary]:
        stmt = (
            select(Student)
            .join(Scholarship, Student.gpa >= Scholarship.min_gpa)
            .where(Scholarship.scholarship_id == scholarship_id)
            .order_by(Student.gpa.desc(), Student.student_id)
        )
        result = await self._session.execute(stmt)
        return [
            StudentSummary(
                student_id=s.student_id,
                name=s.name,
                email=s.email,
                gpa=float(s.gpa),
                major=s.major,
            )
            for s in result.scalars().all()
        ]

    async def latest_application_status(
        self, student_id: int, scholarship_id: Optional[int] = None
    ) -> Optional[str]:
        ranked = select(
            Application.status,
            func.row_number()
            .over(
                partition_by=Application.student_id,
                order_by=(Application.submitted_at.desc(), Application.application_id.desc()),
            )
            .label("rn"),
        ).where(Application.student_id == student_id)
        if scholarship_id is not None:
            ranked = ranked.where(Application.scholarship_id == scholarship_id)
        sub = ranked.subquery()
        result = await self._session.execute(select(sub.c.status).where(sub.c.rn == 1))
        return result.scalar_one_or_none()
