import json
import os
import tempfile
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from config.settings import settings
from llm_gateway import Completion
from storage import Database
from storage.migrate import migrate


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def db(tmp_db) -> Database:
    return Database(tmp_db)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = b"") -> None:
        self.status_code = status_code
        self._payload = payload
        self.content = content or (json.dumps(payload).encode() if payload is not None else b"")

    @property
    def text(self) -> str:
        return self.content.decode(errors="replace")

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeHttpClient:
    """Replays queued responses and records each outbound request."""

    def __init__(self, *responses: FakeResponse) -> None:
        self.responses: List[FakeResponse] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"unexpected request to {url}")
        return self.responses.pop(0)


@pytest.fixture
def fake_http():
    return FakeHttpClient


@pytest.fixture
def fake_response():
    return FakeResponse


class ReplayModel:
    """Completer returning queued replies; dicts are sent as JSON, exceptions are raised."""

    def __init__(self, replies: Sequence[Union[Dict[str, Any], str, Exception]]) -> None:
        self.replies = list(replies)
        self.requests: List[List[Dict[str, str]]] = []

    def __call__(self, messages: Sequence[Dict[str, str]]) -> Completion:
        self.requests.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        content = reply if isinstance(reply, str) else json.dumps(reply)
        return Completion(content=content, model="test-model", tokens_in=12, tokens_out=34, latency_ms=5)


@pytest.fixture
def replay_model():
    return ReplayModel


class RecordingRecorder:
    def __init__(self, log: Optional[List[Dict[str, Any]]] = None) -> None:
        self.log = log if log is not None else []

    def success(self, **fields: Any) -> None:
        self.log.append({"success": True, **fields})

    def failure(self, **fields: Any) -> None:
        self.log.append({"success": False, **fields})


@pytest.fixture
def telemetry_log():
    log: List[Dict[str, Any]] = []
    return log, (lambda: RecordingRecorder(log))
