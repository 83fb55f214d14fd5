from fastapi.testclient import TestClient

from api import StaticTokenVerifier
from api_server import create_app
from config import Settings
from interview_session import ScriptedInterviewModel
from storage import BulletStore, Database, PositionStore

AUTH = {"Authorization": "Bearer tok-1"}


def _client(tmp_db, http, **overrides) -> TestClient:
    cfg = {"DB_PATH": tmp_db, "OPENAI_API_KEY": "sk-test", **overrides}
    app = create_app(
        Settings(_env_file=None, **cfg),
        http_client=http,
        verifier=StaticTokenVerifier({"tok-1": "u1", "tok-2": "u2"}),
        completer=ScriptedInterviewModel(),
    )
    return TestClient(app)


def _bullet(tmp_db, user_id="u1"):
    db = Database(tmp_db)
    position = PositionStore(db).create_position(user_id=user_id, company="Acme", title="Engineer")
    return BulletStore(db).create_bullet(
        user_id=user_id,
        position_id=position.id,
        original_text="Built the billing pipeline",
        current_text="Built the billing pipeline",
    )


def test_speak_returns_mpeg_and_logs_run(tmp_db, fake_http, fake_response):
    http = fake_http(fake_response(200, content=b"ID3-bytes"))
    client = _client(tmp_db, http)

    resp = client.post("/api/speak", json={"text": "Hello there"}, headers=AUTH)

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.content == b"ID3-bytes"
    assert http.calls[0]["json"]["voice"] == "nova"
    runs = client.get("/api/runs", params={"type": "speak"}, headers=AUTH).json()
    assert runs[0]["input"] == {"text": "Hello there", "voice": "nova"}
    assert runs[0]["output"] == {"bytes": 9}


def test_speak_validation_errors(tmp_db, fake_http):
    client = _client(tmp_db, fake_http())

    resp = client.post("/api/speak", json={"text": "Hello", "voice": "robot"}, headers=AUTH)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid voice")
    assert client.post("/api/speak", json={}, headers=AUTH).status_code == 400


def test_upstream_failure_maps_to_bad_gateway(tmp_db, fake_http, fake_response):
    client = _client(tmp_db, fake_http(fake_response(500, {"error": "down"})))

    resp = client.post("/api/speak", json={"text": "Hello"}, headers=AUTH)

    assert resp.status_code == 502
    assert resp.json() == {"error": "Upstream API error: 500"}
    runs = client.get("/api/runs", headers=AUTH).json()
    assert runs[0]["success"] is False


def test_missing_api_key_is_server_error(tmp_db, fake_http, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    client = _client(tmp_db, fake_http(), OPENAI_API_KEY=None)

    resp = client.post("/api/speak", json={"text": "Hello"}, headers=AUTH)

    assert resp.status_code == 500
    assert "API key not configured" in resp.json()["error"]


def test_transcribe_upload(tmp_db, fake_http, fake_response):
    http = fake_http(fake_response(200, {"text": "I led the platform team"}))
    client = _client(tmp_db, http)

    resp = client.post(
        "/api/transcribe",
        files={"audio": ("clip.webm", b"\x1aE\xdf\xa3data", "audio/webm")},
        headers=AUTH,
    )

    assert resp.status_code == 200
    assert resp.json() == {"text": "I led the platform team"}
    assert http.calls[0]["files"]["file"][0] == "audio.webm"
    runs = client.get("/api/runs", params={"type": "transcribe"}, headers=AUTH).json()
    assert runs[0]["input"] == {"audio_size_bytes": 8, "audio_format": "webm"}


def test_transcribe_rejects_bad_uploads(tmp_db, fake_http):
    client = _client(tmp_db, fake_http(), MAX_AUDIO_BYTES=4)

    missing = client.post("/api/transcribe", data={"other": "x"}, headers=AUTH)
    assert missing.status_code == 400
    assert missing.json() == {"error": 'Audio file is required in the "audio" field'}

    too_big = client.post("/api/transcribe", files={"audio": ("a.mp3", b"12345", "audio/mpeg")}, headers=AUTH)
    assert too_big.status_code == 400

    wrong = client.post("/api/transcribe", files={"audio": ("a.ogg", b"1", "audio/ogg")}, headers=AUTH)
    assert wrong.status_code == 400
    assert wrong.json()["error"].startswith("Unsupported audio format: ogg")


def test_embed_stores_vector_on_bullet(tmp_db, fake_http, fake_response):
    bullet = _bullet(tmp_db)
    http = fake_http(fake_response(200, {"data": [{"embedding": [0.25, 0.5]}], "usage": {"total_tokens": 4}}))
    client = _client(tmp_db, http)

    resp = client.post(
        "/api/embed",
        json={"text": bullet.current_text, "type": "bullet", "bulletId": bullet.id},
        headers=AUTH,
    )

    assert resp.status_code == 200
    assert resp.json() == {"embedding": [0.25, 0.5]}
    stored = BulletStore(Database(tmp_db)).get_bullet(bullet.id)
    assert stored.embedding == "[0.25,0.5]"
    assert client.post("/api/embed", json={"text": "x", "type": "resume"}, headers=AUTH).status_code == 400


def test_bullet_edit_and_delete(tmp_db, fake_http):
    bullet = _bullet(tmp_db)
    foreign = _bullet(tmp_db, user_id="u2")
    client = _client(tmp_db, fake_http())

    edited = client.patch(
        f"/api/bullets/{bullet.id}",
        json={"current_text": "Built the billing pipeline in Go", "hard_skills": ["Go"]},
        headers=AUTH,
    )
    assert edited.status_code == 200
    assert edited.json()["was_edited"] is True
    assert edited.json()["hard_skills"] == ["Go"]

    assert client.patch(f"/api/bullets/{bullet.id}", json={}, headers=AUTH).status_code == 400
    assert client.patch(f"/api/bullets/{foreign.id}", json={"category": "x"}, headers=AUTH).status_code == 404
    assert client.delete(f"/api/bullets/{foreign.id}", headers=AUTH).status_code == 404

    assert client.delete(f"/api/bullets/{bullet.id}", headers=AUTH).status_code == 204
    assert client.get("/api/bullets", headers=AUTH).json() == []


def test_bullet_patch_with_explicit_nulls(tmp_db, fake_http):
    bullet = _bullet(tmp_db)
    client = _client(tmp_db, fake_http())

    cleared = client.patch(f"/api/bullets/{bullet.id}", json={"hard_skills": None, "soft_skills": None}, headers=AUTH)
    assert cleared.status_code == 200
    assert cleared.json()["hard_skills"] == []
    assert cleared.json()["soft_skills"] == []
    assert cleared.json()["was_edited"] is False

    resp = client.patch(f"/api/bullets/{bullet.id}", json={"current_text": None}, headers=AUTH)
    assert resp.status_code == 400
    assert resp.json() == {"error": "current_text cannot be null"}
    stored = client.get("/api/bullets", headers=AUTH).json()[0]
    assert stored["current_text"] == "Built the billing pipeline"
    assert stored["was_edited"] is False


def test_account_reset(tmp_db, fake_http):
    _bullet(tmp_db)
    _bullet(tmp_db, user_id="u2")
    client = _client(tmp_db, fake_http())

    resp = client.delete("/api/account/data", headers=AUTH)

    assert resp.status_code == 200
    assert resp.json()["deleted"]["bullets"] == 1
    assert resp.json()["deleted"]["positions"] == 1
    assert client.get("/api/positions", headers=AUTH).json() == []
    assert len(client.get("/api/positions", headers={"Authorization": "Bearer tok-2"}).json()) == 1


def test_job_draft_flow(tmp_db, fake_http, fake_response):
    bullet = _bullet(tmp_db)
    foreign = _bullet(tmp_db, user_id="u2")
    store = BulletStore(Database(tmp_db))
    store.set_embedding(bullet.id, [0.9, 0.1])
    store.set_embedding(foreign.id, [1.0, 0.0])
    http = fake_http(fake_response(200, {"data": [{"embedding": [1.0, 0.0]}], "usage": {"total_tokens": 9}}))
    client = _client(tmp_db, http)

    created = client.post("/api/job-drafts", json={"text": "Billing Engineer\nJoin us at Initech"}, headers=AUTH)

    assert created.status_code == 201
    body = created.json()
    assert body["matchedBulletIds"] == [bullet.id]
    assert body["selectedBulletIds"] == [bullet.id]
    assert body["matches"][0]["similarity"] > 0.9
    assert http.calls[0]["json"]["input"] == "Billing Engineer\nJoin us at Initech"
    draft_id = body["draftId"]

    listed = client.get("/api/job-drafts", headers=AUTH).json()
    assert [d["id"] for d in listed] == [draft_id]
    assert listed[0]["company"] == "Initech"
    detail = client.get(f"/api/job-drafts/{draft_id}", headers=AUTH).json()
    assert [b["id"] for b in detail["bullets"]] == [bullet.id]
    assert detail["bullets"][0]["position"]["company"] == "Acme"

    cleared = client.patch(f"/api/job-drafts/{draft_id}", json={"selectedBulletIds": []}, headers=AUTH)
    assert cleared.status_code == 200
    assert cleared.json()["selected_bullet_ids"] == []
    rejected = client.patch(f"/api/job-drafts/{draft_id}", json={"selectedBulletIds": [foreign.id]}, headers=AUTH)
    assert rejected.status_code == 400
    assert rejected.json()["error"].startswith("Unknown bullet ids")

    other = {"Authorization": "Bearer tok-2"}
    assert client.get(f"/api/job-drafts/{draft_id}", headers=other).status_code == 404
    assert client.delete(f"/api/job-drafts/{draft_id}", headers=other).status_code == 404
    assert client.delete(f"/api/job-drafts/{draft_id}", headers=AUTH).status_code == 204
    assert client.get("/api/job-drafts", headers=AUTH).json() == []


def test_job_draft_requires_text(tmp_db, fake_http):
    client = _client(tmp_db, fake_http())

    resp = client.post("/api/job-drafts", json={}, headers=AUTH)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Text is required"}
