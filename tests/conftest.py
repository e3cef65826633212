"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from maintenance_scheduler.domain.models import Base
from maintenance_scheduler.domain.records import ServiceRecord


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def make_service():
    """Factory for ServiceRecord with sensible defaults and sequential ids."""
    counter = {"n": 0}

    def _make(day=date(2025, 9, 1), start="09:00", duration=60, **kwargs):
        counter["n"] += 1
        kwargs.setdefault("id", f"svc-{counter['n']}")
        kwargs.setdefault("client_name", f"Client {counter['n']}")
        return ServiceRecord(service_date=day, start_time=start, duration_minutes=duration, **kwargs)

    return _make


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
