"""Persistence of job-description drafts and the bullets retrieved for them."""
from __future__ import annotations

import sqlite3
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field

from shared import to_pg_vector

from ._rows import dump_json, load_json, new_id, now
from .bullets import BulletStore, BulletWithPosition
from .sqlite import Database, RecordNotFound


class JobDraftPayload(BaseModel):
    user_id: str
    jd_text: str = Field(min_length=1)
    job_title: Optional[str] = None
    company: Optional[str] = None
    jd_embedding: Optional[str] = None
    retrieved_bullet_ids: List[str] = Field(default_factory=list)
    selected_bullet_ids: List[str] = Field(default_factory=list)


class JobDraftRecord(JobDraftPayload):
    id: str
    created_at: str
    updated_at: str


class JobDraftWithBullets(JobDraftRecord):
    bullets: List[BulletWithPosition] = Field(default_factory=list)


class JobDraftStore:  # SQLite-backed job draft storage
    def __init__(self, db: Database) -> None:
        self._db = db

    def create_job_draft(self, *, embedding: Optional[Sequence[float]] = None, **data: Any) -> JobDraftRecord:
        if embedding is not None:
            data["jd_embedding"] = to_pg_vector(embedding)
        payload = JobDraftPayload(**data)
        timestamp = now()
        record = JobDraftRecord(**payload.model_dump(), id=new_id(), created_at=timestamp, updated_at=timestamp)
        with self._db.connect() as conn:
            conn.execute(
                """INSERT INTO job_drafts
                   (id, user_id, job_title, company, jd_text, jd_embedding,
                    retrieved_bullet_ids, selected_bullet_ids, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.user_id,
                    record.job_title,
                    record.company,
                    record.jd_text,
                    record.jd_embedding,
                    dump_json(record.retrieved_bullet_ids),
                    dump_json(record.selected_bullet_ids),
                    record.created_at,
                    record.updated_at,
                ),
            )
        return record

    def list_job_drafts(self, user_id: str) -> List[JobDraftRecord]:
        """Drafts for ``user_id``, newest first."""

        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM job_drafts WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
        return [_record(row) for row in rows]

    def get_job_draft(self, draft_id: str) -> Optional[JobDraftRecord]:
        with self._db.connect() as conn:
            row = conn.execute("SELECT * FROM job_drafts WHERE id = ?", (draft_id,)).fetchone()
        return _record(row) if row else None

    def get_job_draft_with_bullets(self, draft_id: str, bullets: BulletStore) -> Optional[JobDraftWithBullets]:
        """The draft with its selected bullets in selection order.

        Falls back to the retrieved ids when nothing is selected.
        """

        draft = self.get_job_draft(draft_id)
        if draft is None:
            return None
        bullet_ids = draft.selected_bullet_ids or draft.retrieved_bullet_ids
        return JobDraftWithBullets(**draft.model_dump(), bullets=bullets.get_bullets(bullet_ids))

    def update_selected_bullets(self, draft_id: str, selected_bullet_ids: Sequence[str]) -> JobDraftRecord:
        with self._db.connect() as conn:
            cur = conn.execute(
                "UPDATE job_drafts SET selected_bullet_ids = ?, updated_at = ? WHERE id = ?",
                (dump_json(list(selected_bullet_ids)), now(), draft_id),
            )
            if cur.rowcount == 0:
                raise RecordNotFound(f"job draft {draft_id} not found")
            row = conn.execute("SELECT * FROM job_drafts WHERE id = ?", (draft_id,)).fetchone()
        return _record(row)

    def delete_job_draft(self, draft_id: str) -> None:
        with self._db.connect() as conn:
            conn.execute("DELETE FROM job_drafts WHERE id = ?", (draft_id,))


def _record(row: sqlite3.Row) -> JobDraftRecord:
    data = dict(row)
    data["retrieved_bullet_ids"] = load_json(data.get("retrieved_bullet_ids"), [])
    data["selected_bullet_ids"] = load_json(data.get("selected_bullet_ids"), [])
    return JobDraftRecord(**data)


__all__ = ["JobDraftPayload", "JobDraftRecord", "JobDraftStore", "JobDraftWithBullets"]
