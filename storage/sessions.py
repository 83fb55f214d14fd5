"""Persistence of interview session state."""
from __future__ import annotations

import sqlite3
from typing import List, Optional

from pydantic import BaseModel

from contracts import InterviewState

from ._rows import now
from .sqlite import Database


class SessionRecord(BaseModel):
    session_id: str
    user_id: str
    state: InterviewState
    created_at: str
    updated_at: str


class SessionStore:  # SQLite-backed interview state storage
    def __init__(self, db: Database) -> None:
        self._db = db

    def save_session(self, session_id: str, user_id: str, state: InterviewState) -> SessionRecord:
        """Insert or replace the stored state for ``session_id``."""

        timestamp = now()
        state_json = state.model_dump_json(by_alias=True)
        with self._db.connect() as conn:
            conn.execute(
                """INSERT INTO interview_sessions (session_id, user_id, status, state_json, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(session_id) DO UPDATE SET
                     status = excluded.status,
                     state_json = excluded.state_json,
                     updated_at = excluded.updated_at""",
                (session_id, user_id, state.status, state_json, timestamp, timestamp),
            )
            row = conn.execute("SELECT * FROM interview_sessions WHERE session_id = ?", (session_id,)).fetchone()
        return _record(row)

    def load_session(self, session_id: str) -> Optional[SessionRecord]:
        with self._db.connect() as conn:
            row = conn.execute("SELECT * FROM interview_sessions WHERE session_id = ?", (session_id,)).fetchone()
        return _record(row) if row else None

    def list_sessions(self, user_id: str) -> List[SessionRecord]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM interview_sessions WHERE user_id = ? ORDER BY updated_at DESC",
                (user_id,),
            ).fetchall()
        return [_record(row) for row in rows]


def _record(row: sqlite3.Row) -> SessionRecord:
    return SessionRecord(
        session_id=row["session_id"],
        user_id=row["user_id"],
        state=InterviewState.model_validate_json(row["state_json"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


__all__ = ["SessionRecord", "SessionStore"]
