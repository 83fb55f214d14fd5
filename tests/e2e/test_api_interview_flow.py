from fastapi.testclient import TestClient

from api import StaticTokenVerifier
from api_server import create_app
from config import Settings
from interview_session import ScriptedInterviewModel

AUTH = {"Authorization": "Bearer tok-1"}
OTHER = {"Authorization": "Bearer tok-2"}

ANSWERS = [
    "I was a software engineer at Acme Corp",
    "It was in San Francisco, January 2022 to January 2024",
    "I cut API latency by 40% with Redis caching",
    "I led our move to microservices",
    "I think that's everything",
    "Yes, let's wrap up",
]


def _client(tmp_db, completer=None) -> TestClient:
    app = create_app(
        Settings(_env_file=None, DB_PATH=tmp_db, OPENAI_API_KEY="sk-test"),
        http_client=object(),
        verifier=StaticTokenVerifier({"tok-1": "u1", "tok-2": "u2"}),
        completer=completer or ScriptedInterviewModel(),
    )
    return TestClient(app)


def test_scripted_interview_end_to_end(tmp_db):
    client = _client(tmp_db)

    start = client.post("/api/interview-sessions/start", headers=AUTH)
    assert start.status_code == 200
    body = start.json()
    session_id = body["sessionId"]
    assert body["status"] == "in_progress"
    assert body["state"]["messages"][0]["id"] == "initial"

    first = client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": ANSWERS[0]}, headers=AUTH)
    assert first.status_code == 200
    turn = first.json()
    assert turn["state"]["currentPositionIndex"] == 0
    assert turn["state"]["extractedData"]["positions"][0]["position"]["company"] == "Acme Corp"
    assert turn["step"]["shouldContinue"] is True

    for answer in ANSWERS[1:]:
        resp = client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": answer}, headers=AUTH)
        assert resp.status_code == 200
    assert resp.json()["status"] == "completed"

    fetched = client.get(f"/api/interview-sessions/{session_id}", headers=AUTH).json()
    assert fetched["status"] == "completed"
    assert fetched["state"]["extractedData"]["isComplete"] is True

    closed = client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": "one more"}, headers=AUTH)
    assert closed.status_code == 409
    assert closed.json() == {"error": "session already completed"}

    positions = client.get("/api/positions", headers=AUTH).json()
    assert [(p["company"], p["start_date"], p["location"]) for p in positions] == [
        ("Acme Corp", "2022-01-01", "San Francisco")
    ]
    bullets = client.get("/api/bullets", headers=AUTH).json()
    assert len(bullets) == 2
    assert all(not b["is_draft"] for b in bullets)
    assert all(b["position"]["company"] == "Acme Corp" for b in bullets)

    runs = client.get("/api/runs", params={"type": "interview"}, headers=AUTH).json()
    assert len(runs) == 6
    assert all(run["success"] for run in runs)


def test_sessions_are_private_and_auth_is_required(tmp_db):
    client = _client(tmp_db)
    session_id = client.post("/api/interview-sessions/start", headers=AUTH).json()["sessionId"]

    missing = client.get(f"/api/interview-sessions/{session_id}")
    assert missing.status_code == 401
    assert missing.json() == {"error": "Missing authorization header"}

    invalid = client.get(f"/api/interview-sessions/{session_id}", headers={"Authorization": "Bearer nope"})
    assert invalid.status_code == 401
    assert invalid.json() == {"error": "Invalid token"}

    other = client.get(f"/api/interview-sessions/{session_id}", headers=OTHER)
    assert other.status_code == 404
    assert client.get("/api/interview-sessions/unknown", headers=AUTH).status_code == 404


def test_malformed_model_reply_ends_session(tmp_db, replay_model):
    client = _client(tmp_db, completer=replay_model(["not json"]))
    session_id = client.post("/api/interview-sessions/start", headers=AUTH).json()["sessionId"]

    failed = client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": "Acme"}, headers=AUTH)
    assert failed.status_code == 502
    assert failed.json()["error"].startswith("Model response is not valid JSON")

    state = client.get(f"/api/interview-sessions/{session_id}", headers=AUTH).json()["state"]
    assert state["status"] == "error"
    assert [m["role"] for m in state["messages"]] == ["assistant", "user"]

    closed = client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": "retry"}, headers=AUTH)
    assert closed.status_code == 409
    assert closed.json() == {"error": "session ended with status 'error'"}

    runs = client.get("/api/runs", headers=AUTH).json()
    assert [run["success"] for run in runs] == [False]


def test_blank_turn_is_rejected(tmp_db):
    client = _client(tmp_db)
    session_id = client.post("/api/interview-sessions/start", headers=AUTH).json()["sessionId"]

    assert client.post(f"/api/interview-sessions/{session_id}/turn", json={"message": "   "}, headers=AUTH).status_code == 400
    resp = client.post(f"/api/interview-sessions/{session_id}/turn", json={}, headers=AUTH)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_stateless_interview_step(tmp_db):
    client = _client(tmp_db)

    resp = client.post(
        "/api/interview",
        json={"messages": [{"role": "user", "content": "I was a software engineer at Acme Corp"}]},
        headers=AUTH,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["extractedPosition"]["company"] == "Acme Corp"
    assert body["shouldContinue"] is True
    assert body["extractedBullets"] == []

    bad = client.post("/api/interview", json={"messages": [{"role": "assistant", "content": "Hi"}]}, headers=AUTH)
    assert bad.status_code == 400


def test_health(tmp_db):
    assert _client(tmp_db).get("/health").json() == {"status": "ok"}
