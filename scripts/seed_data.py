# scripts/seed_data.py
#
# Loads sample students, scholarships, reviewers, applications and the
# June 2025 holidays. Writes directly through the session, not the gateway,
# so it runs on any day and leaves no audit records.

import sys
from datetime import date, datetime, timezone
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from sqlalchemy import delete
from scholarship_gate.infrastructure.database.holiday_repository_db import DbHolidayRepository
from scholarship_gate.infrastructure.database.models import (
    Application,
    Reviewer,
    Scholarship,
    Student,
)
from scholarship_gate.infrastructure.database.session import AsyncSessionLocal, engine, init_db

STUDENTS = [
    Student(student_id=1, name="Alice Johnson", email="alice@example.edu", gpa=3.85, major="Computer Science", enrollment_year=2022),
    Student(student_id=2, name="Bob Smith", email="bob@example.edu", gpa=3.20, major="Mathematics", enrollment_year=2021),
    Student(student_id=3, name="Carla Diaz", email="carla@example.edu", gpa=2.75, major="Biology", enrollment_year=2023),
    Student(student_id=4, name="Dev Patel", email="dev@example.edu", gpa=3.95, major="Physics", enrollment_year=2022),
]

SCHOLARSHIPS = [
    Scholarship(scholarship_id=1, name="Merit Excellence", amount=5000, min_gpa=3.5, deadline=date(2025, 7, 15)),
    Scholarship(scholarship_id=2, name="STEM Access", amount=2500, min_gpa=3.0, deadline=date(2025, 8, 1)),
]

REVIEWERS = [
    Reviewer(reviewer_id=1, name="Dr. Grace Lee", department="Engineering"),
    Reviewer(reviewer_id=2, name="Prof. Omar Hale", department="Sciences"),
]

APPLICATIONS = [
    Application(application_id=1, student_id=1, scholarship_id=1, reviewer_id=1, status="Under Review",
                submitted_at=datetime(2025, 5, 10, 9, 0, tzinfo=timezone.utc)),
    Application(application_id=2, student_id=2, scholarship_id=2, reviewer_id=2, status="Pending",
                submitted_at=datetime(2025, 5, 12, 14, 30, tzinfo=timezone.utc)),
    Application(application_id=3, student_id=4, scholarship_id=1, reviewer_id=1, status="Approved",
                submitted_at=datetime(2025, 5, 3, 11, 15, tzinfo=timezone.utc)),
]

HOLIDAYS = [date(2025, 6, 1), date(2025, 6, 15)]


async def seed():
    await init_db(engine)

    async with AsyncSessionLocal() as session:
        for model in (Application, Reviewer, Scholarship, Student):
            await session.execute(delete(model))
        session.add_all(STUDENTS + SCHOLARSHIPS + REVIEWERS)
        await session.flush()
        session.add_all(APPLICATIONS)
        await session.commit()
        print("Seeded:", len(STUDENTS), "students,", len(SCHOLARSHIPS), "scholarships,",
              len(REVIEWERS), "reviewers,", len(APPLICATIONS), "applications")

        await DbHolidayRepository(session).add(HOLIDAYS, description="University holiday")
        print("Restricted dates:", [d.isoformat() for d in await DbHolidayRepository(session).list_dates()])

    await engine.dispose()

asyncio.run(seed())
