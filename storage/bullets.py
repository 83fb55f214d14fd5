"""Persistence helpers for achievement bullets.

Draft bullets (``is_draft``) are written while an interview is still running and
finalized once it completes; drafts left behind by abandoned sessions are removable
with :meth:`BulletStore.delete_orphaned_drafts`.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from shared import cosine_similarity, from_pg_vector, to_pg_vector

from ._rows import dump_json, load_json, new_id, now
from .sqlite import Database, RecordNotFound

_UPDATABLE = ("current_text", "category", "hard_skills", "soft_skills", "metrics", "assumptions")


class BulletPayload(BaseModel):
    user_id: str
    position_id: Optional[str] = None
    original_text: str = Field(min_length=1)
    current_text: str = Field(min_length=1)
    category: Optional[str] = None
    hard_skills: List[str] = Field(default_factory=list)
    soft_skills: List[str] = Field(default_factory=list)
    metrics: Optional[Dict[str, Any]] = None
    assumptions: Optional[str] = None
    is_draft: bool = False


class BulletRecord(BulletPayload):
    id: str
    was_edited: bool = False
    embedding: Optional[str] = None
    created_at: str
    updated_at: str


class PositionRef(BaseModel):
    company: str
    title: str


class BulletWithPosition(BulletRecord):
    position: Optional[PositionRef] = None


class BulletMatch(BaseModel):  # One similarity hit against a query embedding
    id: str
    current_text: str
    category: Optional[str] = None
    similarity: float


_WITH_POSITION = """
    SELECT b.*, p.company AS position_company, p.title AS position_title
    FROM bullets b LEFT JOIN positions p ON p.id = b.position_id
"""


class BulletStore:  # SQLite-backed bullet storage
    def __init__(self, db: Database) -> None:
        self._db = db

    def list_bullets(self, user_id: str, *, include_drafts: bool = True) -> List[BulletWithPosition]:
        """All bullets for ``user_id`` with company and title, newest first."""

        query = _WITH_POSITION + " WHERE b.user_id = ?"
        if not include_drafts:
            query += " AND b.is_draft = 0"
        with self._db.connect() as conn:
            rows = conn.execute(query + " ORDER BY b.created_at DESC", (user_id,)).fetchall()
        return [_with_position(row) for row in rows]

    def list_by_position(self, user_id: str, position_id: str) -> List[BulletRecord]:
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM bullets WHERE user_id = ? AND position_id = ? ORDER BY created_at ASC",
                (user_id, position_id),
            ).fetchall()
        return [_record(row) for row in rows]

    def get_bullet(self, bullet_id: str) -> Optional[BulletWithPosition]:
        with self._db.connect() as conn:
            row = conn.execute(_WITH_POSITION + " WHERE b.id = ?", (bullet_id,)).fetchone()
        return _with_position(row) if row else None

    def create_bullet(self, **data: Any) -> BulletRecord:
        payload = BulletPayload(**data)
        with self._db.connect() as conn:
            return insert_bullet(conn, payload)

    def create_draft_bullet(self, **data: Any) -> BulletRecord:
        payload = BulletPayload(**{**data, "is_draft": True})
        with self._db.connect() as conn:
            return insert_bullet(conn, payload)

    def finalize_draft_bullets(self, bullet_ids: Sequence[str]) -> int:
        """Clear the draft flag on ``bullet_ids``; returns the number of rows changed."""

        if not bullet_ids:
            return 0
        marks = ", ".join("?" for _ in bullet_ids)
        with self._db.connect() as conn:
            cur = conn.execute(
                f"UPDATE bullets SET is_draft = 0, updated_at = ? WHERE id IN ({marks}) AND is_draft = 1",
                (now(), *bullet_ids),
            )
            return cur.rowcount

    def delete_orphaned_drafts(self, user_id: str) -> int:
        with self._db.connect() as conn:
            cur = conn.execute("DELETE FROM bullets WHERE user_id = ? AND is_draft = 1", (user_id,))
            return cur.rowcount

    def update_bullet(self, bullet_id: str, **updates: Any) -> BulletRecord:
        """Apply ``updates``; changing ``current_text`` marks the bullet as edited."""

        fields: Dict[str, Any] = {}
        for key, value in updates.items():
            if key not in _UPDATABLE:
                continue
            fields[key] = dump_json(value) if key in ("hard_skills", "soft_skills", "metrics") else value
        if "current_text" in updates:
            fields["was_edited"] = 1
        fields["updated_at"] = now()
        assignments = ", ".join(f"{key} = ?" for key in fields)
        with self._db.connect() as conn:
            cur = conn.execute(f"UPDATE bullets SET {assignments} WHERE id = ?", (*fields.values(), bullet_id))
            if cur.rowcount == 0:
                raise RecordNotFound(f"bullet {bullet_id} not found")
            row = conn.execute("SELECT * FROM bullets WHERE id = ?", (bullet_id,)).fetchone()
        return _record(row)

    def set_embedding(self, bullet_id: str, embedding: Sequence[float]) -> None:
        with self._db.connect() as conn:
            cur = conn.execute(
                "UPDATE bullets SET embedding = ? WHERE id = ?",
                (to_pg_vector(embedding), bullet_id),
            )
            if cur.rowcount == 0:
                raise RecordNotFound(f"bullet {bullet_id} not found")

    def match_bullets(
        self,
        user_id: str,
        embedding: Sequence[float],
        *,
        count: int = 50,
        threshold: float = 0.3,
    ) -> List[BulletMatch]:
        """Finalized embedded bullets scoring at least ``threshold``, best first, at most ``count``."""

        with self._db.connect() as conn:
            rows = conn.execute(
                """SELECT id, current_text, category, embedding FROM bullets
                   WHERE user_id = ? AND is_draft = 0 AND embedding IS NOT NULL""",
                (user_id,),
            ).fetchall()
        matches = []
        for row in rows:
            vector = from_pg_vector(row["embedding"])
            if len(vector) != len(embedding):
                continue
            score = cosine_similarity(embedding, vector)
            if score >= threshold:
                matches.append(
                    BulletMatch(
                        id=row["id"],
                        current_text=row["current_text"],
                        category=row["category"],
                        similarity=score,
                    )
                )
        matches.sort(key=lambda match: match.similarity, reverse=True)
        return matches[:count]

    def get_bullets(self, bullet_ids: Sequence[str]) -> List[BulletWithPosition]:
        """Bullets for ``bullet_ids`` in the given order; unknown ids are skipped."""

        if not bullet_ids:
            return []
        marks = ", ".join("?" for _ in bullet_ids)
        with self._db.connect() as conn:
            rows = conn.execute(_WITH_POSITION + f" WHERE b.id IN ({marks})", tuple(bullet_ids)).fetchall()
        by_id = {row["id"]: _with_position(row) for row in rows}
        return [by_id[bullet_id] for bullet_id in bullet_ids if bullet_id in by_id]

    def delete_bullet(self, bullet_id: str) -> None:
        with self._db.connect() as conn:
            conn.execute("DELETE FROM bullets WHERE id = ?", (bullet_id,))


def insert_bullet(conn: sqlite3.Connection, payload: BulletPayload) -> BulletRecord:
    timestamp = now()
    record = BulletRecord(**payload.model_dump(), id=new_id(), created_at=timestamp, updated_at=timestamp)
    conn.execute(
        """INSERT INTO bullets
           (id, user_id, position_id, original_text, current_text, category, hard_skills,
            soft_skills, metrics, assumptions, is_draft, was_edited, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)""",
        (
            record.id,
            record.user_id,
            record.position_id,
            record.original_text,
            record.current_text,
            record.category,
            dump_json(record.hard_skills),
            dump_json(record.soft_skills),
            dump_json(record.metrics),
            record.assumptions,
            int(record.is_draft),
            record.created_at,
            record.updated_at,
        ),
    )
    return record


def _fields(row: sqlite3.Row) -> Dict[str, Any]:
    data = dict(row)
    data["hard_skills"] = load_json(data.get("hard_skills"), [])
    data["soft_skills"] = load_json(data.get("soft_skills"), [])
    data["metrics"] = load_json(data.get("metrics"))
    data["is_draft"] = bool(data.get("is_draft"))
    data["was_edited"] = bool(data.get("was_edited"))
    return data


def _record(row: sqlite3.Row) -> BulletRecord:
    data = _fields(row)
    return BulletRecord(**{key: value for key, value in data.items() if key in BulletRecord.model_fields})


def _with_position(row: sqlite3.Row) -> BulletWithPosition:
    data = _fields(row)
    company = data.pop("position_company", None)
    title = data.pop("position_title", None)
    position = PositionRef(company=company, title=title) if company is not None else None
    return BulletWithPosition(**data, position=position)


__all__ = [
    "BulletMatch",
    "BulletPayload",
    "BulletRecord",
    "BulletStore",
    "BulletWithPosition",
    "PositionRef",
    "insert_bullet",
]
