"""
Pytest configuration and fixtures.

- Unit tests exercise the recurrence expander directly (no database)
- API tests run the FastAPI app against an in-memory SQLite database
"""

import os

# Must be set before the package creates its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi.testclient import TestClient

from fieldservice.database import Base, SessionLocal, engine
from fieldservice.main import app


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def weekly_job_payload():
    return {
        "orgId": "org_1",
        "clientId": "client_1",
        "title": "Office cleaning",
        "startDate": "2024-01-01T00:00:00",
        "startTime": "09:00",
        "duration": 90,
        "isRecurring": True,
        "recurringPattern": "weekly",
        "recurringDays": [1, 3, 5],
        "recurringEndDate": "2024-01-15T00:00:00",
    }


@pytest.fixture
def one_off_job_payload():
    return {
        "orgId": "org_1",
        "clientId": "client_2",
        "title": "Move-out clean",
        "startDate": "2024-02-10T00:00:00",
        "startTime": "10:30",
        "duration": 180,
        "isRecurring": False,
    }
