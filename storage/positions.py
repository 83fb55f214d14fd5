"""Persistence helpers for work positions."""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from contracts import position_key
from shared import to_postgres_date

from ._rows import new_id, now
from .bullets import BulletPayload, BulletRecord, insert_bullet
from .sqlite import Database, RecordNotFound

_UPDATABLE = ("company", "title", "location", "start_date", "end_date")


class PositionPayload(BaseModel):
    user_id: str
    company: str = Field(min_length=1)
    title: str = Field(min_length=1)
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class PositionRecord(PositionPayload):
    id: str
    created_at: str
    updated_at: str


class PositionStore:  # SQLite-backed position storage
    def __init__(self, db: Database) -> None:
        self._db = db

    def list_positions(self, user_id: str) -> List[PositionRecord]:
        """Positions for ``user_id``, most recent start first, undated last."""

        with self._db.connect() as conn:
            rows = conn.execute(
                """SELECT * FROM positions WHERE user_id = ?
                   ORDER BY start_date IS NULL, start_date DESC, created_at DESC""",
                (user_id,),
            ).fetchall()
        return [_record(row) for row in rows]

    def get_position(self, position_id: str) -> Optional[PositionRecord]:
        with self._db.connect() as conn:
            row = conn.execute("SELECT * FROM positions WHERE id = ?", (position_id,)).fetchone()
        return _record(row) if row else None

    def find_position(self, user_id: str, company: str, title: str) -> Optional[PositionRecord]:
        """Oldest position matching company and title under :func:`contracts.position_key`.

        Compared in Python: SQLite ``lower()`` only folds ASCII and keeps inner whitespace.
        """

        key = position_key(company, title)
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM positions WHERE user_id = ? ORDER BY created_at",
                (user_id,),
            ).fetchall()
        for row in rows:
            if position_key(row["company"], row["title"]) == key:
                return _record(row)
        return None

    def create_position(self, **data: Any) -> PositionRecord:
        payload = PositionPayload(**data)
        with self._db.connect() as conn:
            return insert_position(conn, payload)

    def update_position(self, position_id: str, **updates: Any) -> PositionRecord:
        fields = {key: value for key, value in updates.items() if key in _UPDATABLE}
        for key in ("start_date", "end_date"):
            if key in fields:
                fields[key] = to_postgres_date(fields[key])
        fields["updated_at"] = now()
        assignments = ", ".join(f"{key} = ?" for key in fields)
        with self._db.connect() as conn:
            cur = conn.execute(
                f"UPDATE positions SET {assignments} WHERE id = ?",
                (*fields.values(), position_id),
            )
            if cur.rowcount == 0:
                raise RecordNotFound(f"position {position_id} not found")
            row = conn.execute("SELECT * FROM positions WHERE id = ?", (position_id,)).fetchone()
        return _record(row)

    def delete_position(self, position_id: str) -> None:
        """Delete a position; its bullets go with it."""

        with self._db.connect() as conn:
            conn.execute("DELETE FROM positions WHERE id = ?", (position_id,))

    def create_position_with_bullets(
        self,
        position: Dict[str, Any],
        bullets: Sequence[Dict[str, Any]],
    ) -> tuple[PositionRecord, List[str]]:
        """Insert a position and its bullets in one transaction."""

        payload = PositionPayload(**position)
        bullet_payloads = [BulletPayload(**{**bullet, "user_id": payload.user_id}) for bullet in bullets]
        with self._db.connect() as conn:
            record = insert_position(conn, payload)
            created: List[BulletRecord] = [
                insert_bullet(conn, item.model_copy(update={"position_id": record.id}))
                for item in bullet_payloads
            ]
        return record, [bullet.id for bullet in created]


def insert_position(conn: sqlite3.Connection, payload: PositionPayload) -> PositionRecord:
    timestamp = now()
    record = PositionRecord(
        **payload.model_dump(exclude={"start_date", "end_date"}),
        start_date=to_postgres_date(payload.start_date),
        end_date=to_postgres_date(payload.end_date),
        id=new_id(),
        created_at=timestamp,
        updated_at=timestamp,
    )
    conn.execute(
        """INSERT INTO positions
           (id, user_id, company, title, location, start_date, end_date, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            record.id,
            record.user_id,
            record.company,
            record.title,
            record.location,
            record.start_date,
            record.end_date,
            record.created_at,
            record.updated_at,
        ),
    )
    return record


def _record(row: sqlite3.Row) -> PositionRecord:
    return PositionRecord(**dict(row))


__all__ = ["PositionPayload", "PositionRecord", "PositionStore", "insert_position"]
