"""Fixtures for gateway tests."""

from datetime import date

import pytest

from gateway_fakes import FakeDatabase, FakeUnitOfWork
from scholarship_gate.application.gateway import ProtectedResourceGateway
from scholarship_gate.domain.calendar import CalendarStore
from scholarship_gate.observability.metrics import MetricsCollector


@pytest.fixture
def fake_db():
    return FakeDatabase({"students": "student_id", "scholarships": "scholarship_id"})


@pytest.fixture
def calendar():
    return CalendarStore([date(2025, 6, 1), date(2025, 6, 15)])


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def gateway(fake_db, calendar, metrics):
    return ProtectedResourceGateway(
        lambda: FakeUnitOfWork(fake_db),
        calendar,
        known_resources=["students", "scholarships"],
        protected_resources=["students"],
        metrics=metrics,
    )
