import os

# Keep the application's own engine off disk during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from focus_agent.database import Base, get_db
from focus_agent.main import app

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Override the dependency
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

BASE_TIME = datetime(2026, 3, 2, 9, 0, 0)

@pytest.fixture
def client():
    return TestClient(app)

@pytest.fixture
def test_db():
    # Create the tables
    Base.metadata.create_all(bind=engine)
    yield
    # Drop the tables
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

def signup(client, email="ada@example.com", name="Ada", password="focus-pass"):
    response = client.post("/api/auth/signup", json={
        "name": name,
        "email": email,
        "password": password,
    })
    assert response.status_code == 200
    return response.json()

@pytest.fixture
def auth_headers(client, test_db):
    token = signup(client)["access_token"]
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def log_session(client, auth_headers):
    """
    Start and end a session through the API. Sessions are spaced an hour
    apart by index so that a higher index is more recent.
    """
    def _log(index, planned_minutes, actual_minutes, status="completed", headers=None):
        headers = headers or auth_headers
        started_at = BASE_TIME + timedelta(hours=index)
        response = client.post("/api/sessions", headers=headers, json={
            "planned_duration_seconds": int(planned_minutes * 60),
            "started_at": started_at.isoformat(),
        })
        assert response.status_code == 201
        session_id = response.json()["session_id"]

        response = client.put(f"/api/sessions/{session_id}", headers=headers, json={
            "status": status,
            "ended_at": (started_at + timedelta(minutes=actual_minutes)).isoformat(),
            "actual_duration_seconds": int(actual_minutes * 60),
        })
        assert response.status_code == 200
        return response.json()

    return _log
