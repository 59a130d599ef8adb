FULL_PAYLOAD = {
    "coach_personality": "encouraging",
    "focus_domains": ["deep_work", "studying"],
    "distraction_triggers": ["phone_social", "boredom"],
    "default_focus_minutes": 30,
    "default_break_minutes": 10,
    "session_rules": ["single_task_only"],
    "preferred_focus_time": "late_morning",
    "success_goals": ["more_consistent"],
    "custom_focus_domain": "  thesis  ",
}

def test_get_preferences_before_onboarding(client, auth_headers):
    response = client.get("/api/user/preferences", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() is None

def test_save_full_payload(client, auth_headers):
    response = client.post("/api/user/preferences", headers=auth_headers, json=FULL_PAYLOAD)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    data = client.get("/api/user/preferences", headers=auth_headers).json()
    assert data["coach_personality"] == "encouraging"
    assert data["default_focus_minutes"] == 30
    assert data["default_break_minutes"] == 10
    assert data["custom_focus_domain"] == "thesis"
    assert data["completed_at"] is not None

def test_full_payload_defaults(client, auth_headers):
    payload = dict(FULL_PAYLOAD, default_break_minutes=None, session_rules=["juggling"], custom_focus_domain="   ")
    response = client.post("/api/user/preferences", headers=auth_headers, json=payload)
    assert response.status_code == 200

    data = client.get("/api/user/preferences", headers=auth_headers).json()
    assert data["default_break_minutes"] == 5
    assert data["session_rules"] == []
    assert data["custom_focus_domain"] is None

def test_partial_update_requires_existing_row(client, auth_headers):
    response = client.post("/api/user/preferences", headers=auth_headers, json={"coach_personality": "strict"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No existing preferences; send full onboarding payload first."

def test_partial_update_merges_valid_fields(client, auth_headers):
    client.post("/api/user/preferences", headers=auth_headers, json=FULL_PAYLOAD)

    response = client.post("/api/user/preferences", headers=auth_headers, json={
        "coach_personality": "strict",
        "default_focus_minutes": 500,  # out of range, dropped
        "max_sessions_per_day": 6,
    })
    assert response.status_code == 200

    data = client.get("/api/user/preferences", headers=auth_headers).json()
    assert data["coach_personality"] == "strict"
    assert data["default_focus_minutes"] == 30
    assert data["max_sessions_per_day"] == 6
    assert data["focus_domains"] == ["deep_work", "studying"]

def test_too_many_distraction_triggers(client, auth_headers):
    client.post("/api/user/preferences", headers=auth_headers, json=FULL_PAYLOAD)
    response = client.post("/api/user/preferences", headers=auth_headers, json={
        "distraction_triggers": ["phone_social", "boredom", "fatigue", "stuck"],
    })
    assert response.status_code == 400

def test_invalid_body(client, auth_headers):
    response = client.post("/api/user/preferences", headers=auth_headers, content="not json")
    assert response.status_code == 400

    response = client.post("/api/user/preferences", headers=auth_headers, json={"coach_personality": "grumpy"})
    assert response.status_code == 400
    assert "coach_personality" in response.json()["detail"]

def test_preferences_require_auth(client, test_db):
    assert client.get("/api/user/preferences").status_code == 401
    assert client.post("/api/user/preferences", json=FULL_PAYLOAD).status_code == 401

def test_full_resave_keeps_max_sessions_per_day(client, auth_headers):
    client.post("/api/user/preferences", headers=auth_headers, json=FULL_PAYLOAD)
    client.post("/api/user/preferences", headers=auth_headers, json={"max_sessions_per_day": 4})

    # Onboarding answers sent again do not touch the daily cap
    response = client.post("/api/user/preferences", headers=auth_headers, json=FULL_PAYLOAD)
    assert response.status_code == 200

    data = client.get("/api/user/preferences", headers=auth_headers).json()
    assert data["max_sessions_per_day"] == 4

def test_full_payload_ignores_out_of_range_max_sessions(client, auth_headers):
    payload = dict(FULL_PAYLOAD, max_sessions_per_day=50)
    response = client.post("/api/user/preferences", headers=auth_headers, json=payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    data = client.get("/api/user/preferences", headers=auth_headers).json()
    assert data["default_focus_minutes"] == 30
    assert data["max_sessions_per_day"] is None
