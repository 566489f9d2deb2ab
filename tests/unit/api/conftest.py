"""Fixtures for API unit tests: temporary SQLite database, fixed clock, fresh calendar, AsyncClient."""

from datetime import date, datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from scholarship_gate.domain.calendar import CalendarStore
from scholarship_gate.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    init_db,
)
from scholarship_gate.main import app
from scholarship_gate.observability.metrics import MetricsCollector

SATURDAY = datetime(2025, 5, 31, 10, 0, tzinfo=timezone.utc)


class FixedClock:
    """Settable clock so tests choose the attempt instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    await init_db(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def clock():
    return FixedClock(SATURDAY)


@pytest.fixture
def calendar_store():
    return CalendarStore([date(2025, 6, 1), date(2025, 6, 15)])


@pytest.fixture
def app_with_overrides(session_factory, clock, calendar_store):
    """App wired to the temporary database, fixed clock and a fresh calendar."""
    from scholarship_gate.api import dependencies

    metrics = MetricsCollector()
    app.dependency_overrides[dependencies.get_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_clock] = lambda: clock
    app.dependency_overrides[dependencies.get_calendar_store] = lambda: calendar_store
    app.dependency_overrides[dependencies.get_metrics] = lambda: metrics
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def actor_headers():
    return {"X-Actor-ID": "registrar"}
