"""
Central pytest configuration for the clinic booking tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["LOG_TO_FILE"] = "0"
os.environ["CLINIC_TZ"] = "UTC"
os.environ.pop("WEBHOOK_URL", None)

from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)


def next_weekday(weekday: int, min_days_ahead: int = 7):
    """Next calendar date with Python weekday() == weekday, at least N days out."""
    start = datetime.now(timezone.utc).date() + timedelta(days=min_days_ahead)
    return start + timedelta(days=(weekday - start.weekday()) % 7)


@pytest.fixture
def future_monday():
    return next_weekday(0)


@pytest.fixture
def db_session():
    """Fresh schema on the shared in-memory database for each test."""
    from clinic_booking.db.session import SessionLocal, create_tables, drop_tables

    drop_tables()
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


@pytest.fixture
def app(db_session):
    """Flask app bound to the in-memory database."""
    from clinic_booking.main import create_app

    flask_app = create_app(testing=True)
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()
