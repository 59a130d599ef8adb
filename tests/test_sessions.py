from datetime import datetime
from focus_agent.models.focus import FocusSession
from focus_agent.schemas.focus import FocusSessionResponse
from tests.conftest import signup

def test_start_session(client, auth_headers):
    response = client.post("/api/sessions", headers=auth_headers, json={
        "planned_duration_seconds": 1500,
        "started_at": "2026-03-02T09:00:00",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "active"
    assert data["planned_duration_seconds"] == 1500
    assert data["actual_duration_seconds"] is None
    assert data["total_distractions"] == 0

def test_start_session_rejects_negative_duration(client, auth_headers):
    response = client.post("/api/sessions", headers=auth_headers, json={"planned_duration_seconds": -60})
    assert response.status_code == 422

def test_end_session_derives_actual_duration(client, auth_headers):
    created = client.post("/api/sessions", headers=auth_headers, json={
        "planned_duration_seconds": 1500,
        "started_at": "2026-03-02T09:00:00",
    }).json()

    response = client.put(f"/api/sessions/{created['session_id']}", headers=auth_headers, json={
        "status": "abandoned",
        "ended_at": "2026-03-02T09:12:30",
        "total_distractions": 2,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "abandoned"
    assert data["actual_duration_seconds"] == 750
    assert data["total_distractions"] == 2

def test_end_session_twice(client, log_session, auth_headers):
    session = log_session(0, 25, 25)
    response = client.put(f"/api/sessions/{session['session_id']}", headers=auth_headers, json={"status": "completed"})
    assert response.status_code == 400

def test_end_session_of_another_user(client, auth_headers):
    other = signup(client, email="grace@example.com", name="Grace")
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}
    created = client.post("/api/sessions", headers=other_headers, json={"planned_duration_seconds": 600}).json()

    response = client.put(f"/api/sessions/{created['session_id']}", headers=auth_headers, json={"status": "completed"})
    assert response.status_code == 404

    response = client.put("/api/sessions/9999", headers=auth_headers, json={"status": "completed"})
    assert response.status_code == 404

def test_end_session_requires_finished_status(client, auth_headers):
    created = client.post("/api/sessions", headers=auth_headers, json={"planned_duration_seconds": 600}).json()
    response = client.put(f"/api/sessions/{created['session_id']}", headers=auth_headers, json={"status": "active"})
    assert response.status_code == 422

def test_recent_sessions_newest_first(client, log_session, auth_headers):
    log_session(0, 25, 20)
    log_session(1, 25, 24.5, status="abandoned")
    client.post("/api/sessions", headers=auth_headers, json={
        "planned_duration_seconds": 1500,
        "started_at": datetime(2026, 3, 2, 20, 0).isoformat(),
    })

    response = client.get("/api/sessions/recent", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    # The active session is not finished yet
    assert [s["status"] for s in data] == ["abandoned", "completed"]
    assert data[0]["durationMinutes"] == 25
    assert data[1]["durationMinutes"] == 20

def test_recent_sessions_limit(client, log_session, auth_headers):
    for i in range(4):
        log_session(i, 25, 25)
    response = client.get("/api/sessions/recent?limit=2", headers=auth_headers)
    assert len(response.json()) == 2
    assert client.get("/api/sessions/recent?limit=0", headers=auth_headers).status_code == 422

def test_log_distraction_increments_session_count(client, auth_headers):
    created = client.post("/api/sessions", headers=auth_headers, json={"planned_duration_seconds": 1500}).json()

    response = client.post(f"/api/sessions/{created['session_id']}/distractions", headers=auth_headers, json={
        "distraction_type": "  Social Media ",
        "time_into_session_seconds": 420,
        "time_remaining_seconds": 1080,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["distraction_type"] == "Social Media"
    assert data["time_into_session_seconds"] == 420
    assert data["time_remaining_seconds"] == 1080
    assert data["total_distractions"] == 1

    response = client.post(f"/api/sessions/{created['session_id']}/distractions", headers=auth_headers, json={
        "distraction_type": "Coworker",
    })
    assert response.json()["total_distractions"] == 2

    ended = client.put(f"/api/sessions/{created['session_id']}", headers=auth_headers, json={"status": "completed"})
    assert ended.json()["total_distractions"] == 2

def test_log_distraction_on_finished_session(client, log_session, auth_headers):
    session = log_session(0, 25, 25)
    response = client.post(f"/api/sessions/{session['session_id']}/distractions", headers=auth_headers, json={
        "distraction_type": "Other",
    })
    assert response.status_code == 400

def test_log_distraction_on_another_users_session(client, auth_headers):
    other = signup(client, email="grace@example.com", name="Grace")
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}
    created = client.post("/api/sessions", headers=other_headers, json={"planned_duration_seconds": 600}).json()

    response = client.post(f"/api/sessions/{created['session_id']}/distractions", headers=auth_headers, json={
        "distraction_type": "Other",
    })
    assert response.status_code == 404

def test_log_distraction_validation(client, auth_headers):
    created = client.post("/api/sessions", headers=auth_headers, json={"planned_duration_seconds": 600}).json()
    url = f"/api/sessions/{created['session_id']}/distractions"

    assert client.post(url, headers=auth_headers, json={"distraction_type": "   "}).status_code == 422
    assert client.post(url, headers=auth_headers, json={
        "distraction_type": "Other",
        "time_into_session_seconds": -1,
    }).status_code == 422

def test_session_response_reads_orm_rows():
    assert FocusSessionResponse.model_config["from_attributes"] is True

    row = FocusSession(
        session_id=7,
        user_id=1,
        started_at=datetime(2026, 3, 2, 9, 0),
        planned_duration_seconds=1500,
        status="active",
        total_distractions=0,
    )
    response = FocusSessionResponse.model_validate(row)
    assert response.session_id == 7
    assert response.ended_at is None
    assert response.actual_duration_seconds is None
