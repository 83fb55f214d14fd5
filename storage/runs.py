"""Persistence helpers for telemetry runs, one row per hosted model call."""
from __future__ import annotations

import sqlite3
from typing import Any, List, Literal, Optional

from pydantic import BaseModel

from ._rows import dump_json, load_json, new_id, now
from .sqlite import Database

RunType = Literal["interview", "bullet_gen", "embed", "transcribe", "speak", "draft", "export"]


class RunPayload(BaseModel):
    user_id: str
    type: RunType
    prompt_id: Optional[str] = None
    model: Optional[str] = None
    input: Any = None
    output: Any = None
    success: bool
    latency_ms: Optional[int] = None
    tokens_in: Optional[int] = None
    tokens_out: Optional[int] = None


class RunRecord(RunPayload):
    id: str
    created_at: str


class RunStore:  # SQLite-backed telemetry storage
    def __init__(self, db: Database) -> None:
        self._db = db

    def insert_run(self, **data: Any) -> RunRecord:
        """Insert a run row and return it."""

        payload = RunPayload(**data)
        record = RunRecord(**payload.model_dump(), id=new_id(), created_at=now())
        with self._db.connect() as conn:
            conn.execute(
                """INSERT INTO runs
                   (id, user_id, type, prompt_id, model, input, output, success,
                    latency_ms, tokens_in, tokens_out, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.user_id,
                    record.type,
                    record.prompt_id,
                    record.model,
                    dump_json(record.input),
                    dump_json(record.output),
                    int(record.success),
                    record.latency_ms,
                    record.tokens_in,
                    record.tokens_out,
                    record.created_at,
                ),
            )
        return record

    def recent_runs(self, user_id: str, limit: int = 50) -> List[RunRecord]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM runs WHERE user_id = ? ORDER BY created_at DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()
        return [_record(row) for row in rows]

    def runs_by_type(self, user_id: str, run_type: str, limit: int = 50) -> List[RunRecord]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM runs WHERE user_id = ? AND type = ? ORDER BY created_at DESC LIMIT ?",
                (user_id, run_type, limit),
            ).fetchall()
        return [_record(row) for row in rows]


def _record(row: sqlite3.Row) -> RunRecord:
    data = dict(row)
    data["input"] = load_json(data.get("input"))
    data["output"] = load_json(data.get("output"))
    data["success"] = bool(data["success"])
    return RunRecord(**data)


__all__ = ["RunPayload", "RunRecord", "RunStore", "RunType"]
