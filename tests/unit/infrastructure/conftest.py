"""Fixtures for database tests: a file-backed SQLite database per test."""

from datetime import date

import pytest

from scholarship_gate.infrastructure.database.models import Scholarship, Student
from scholarship_gate.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    init_db,
)


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'gate.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def seeded(session_factory):
    """Three students and one scholarship with a 3.0 GPA floor."""
    async with session_factory() as session:
        session.add_all(
            [
                Student(student_id=1, name="Ada", email="ada@example.edu", gpa=3.9, major="Math"),
                Student(student_id=2, name="Ben", email="ben@example.edu", gpa=3.2, major="CS"),
                Student(student_id=3, name="Cy", email="cy@example.edu", gpa=2.5, major="Art"),
                Scholarship(
                    scholarship_id=10,
                    name="Merit",
                    amount=5000,
                    min_gpa=3.0,
                    deadline=date(2025, 9, 1),
                ),
            ]
        )
        await session.commit()
