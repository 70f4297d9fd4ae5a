"""
Fixtures for the excavation tracker tests.

Every test runs against a fresh SQLite file with foreign keys enforced, so
cascade deletes and the estimates.job_id constraint behave like production.
`job` and `estimate` seed one 100' x 2' x 3' trench through the API.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

TEST_DATABASE_URL = "sqlite:///./test.db"

# Settings read DATABASE_URL at import, so set it before the app loads
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from excavation_tracker.database import Base, get_db, enable_sqlite_foreign_keys
from excavation_tracker.main import app


engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _test_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


app.dependency_overrides[get_db] = _test_session


@pytest.fixture(autouse=True)
def fresh_schema():
    """jobs and estimates tables exist for exactly one test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    """Session for seeding rows and checking what was persisted."""
    yield from _test_session()


@pytest.fixture
def job(client):
    """A persisted job, as returned by the API."""
    response = client.post("/api/jobs", json={
        "name": "Main St Sewer Tie-In",
        "location": "412 Main St",
        "client": "City of Springfield",
        "startDate": "2024-05-01",
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def estimate(client, job):
    """A persisted 100' x 2' x 3' trench estimate on `job`."""
    response = client.post("/api/estimates", json={
        "jobId": job["id"],
        "description": "Sewer lateral",
        "pipeLength": 100,
        "trenchWidth": 2,
        "trenchDepth": 3,
        "estimatedHours": 8,
    })
    assert response.status_code == 201
    return response.json()
