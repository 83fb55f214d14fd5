"""Mirror a session's extracted positions and bullets into storage as drafts."""
from __future__ import annotations

import logging
from typing import List

from contracts import InterviewState, Position
from storage import BulletStore, PositionRecord, PositionStore
from shared import to_postgres_date

logger = logging.getLogger(__name__)


class ExtractionSync:
    """Idempotent: positions are matched on :func:`contracts.position_key`, bullets on their text."""

    def __init__(self, positions: PositionStore, bullets: BulletStore, user_id: str) -> None:
        self._positions = positions
        self._bullets = bullets
        self._user_id = user_id

    def persist(self, state: InterviewState) -> List[str]:
        """Write unsaved bullets as drafts and return the new bullet ids."""

        created: List[str] = []
        for entry in state.positions:
            record = self._upsert_position(entry.position)
            stored = {bullet.original_text for bullet in self._bullets.list_by_position(self._user_id, record.id)}
            for bullet in entry.bullets:
                if bullet.text in stored:
                    continue
                draft = self._bullets.create_draft_bullet(
                    user_id=self._user_id,
                    position_id=record.id,
                    original_text=bullet.text,
                    current_text=bullet.text,
                    category=bullet.category,
                    hard_skills=bullet.hard_skills,
                    soft_skills=bullet.soft_skills,
                    metrics=bullet.metrics.model_dump() if bullet.metrics else None,
                    assumptions=bullet.assumptions,
                )
                stored.add(bullet.text)
                created.append(draft.id)
        if created:
            logger.info("Saved %d draft bullets user=%s", len(created), self._user_id)
        return created

    def finalize(self, state: InterviewState) -> int:
        """Clear the draft flag on every stored bullet of the session's positions."""

        draft_ids: List[str] = []
        for entry in state.positions:
            record = self._positions.find_position(self._user_id, entry.position.company, entry.position.title)
            if record is None:
                continue
            draft_ids.extend(
                bullet.id for bullet in self._bullets.list_by_position(self._user_id, record.id) if bullet.is_draft
            )
        return self._bullets.finalize_draft_bullets(draft_ids)

    def _upsert_position(self, position: Position) -> PositionRecord:
        record = self._positions.find_position(self._user_id, position.company, position.title)
        if record is None:
            return self._positions.create_position(
                user_id=self._user_id,
                company=position.company,
                title=position.title,
                location=position.location,
                start_date=position.start_date,
                end_date=position.end_date,
            )
        updates = {
            key: value
            for key, value in (
                ("company", position.company),
                ("title", position.title),
                ("location", position.location),
                ("start_date", to_postgres_date(position.start_date)),
                ("end_date", to_postgres_date(position.end_date)),
            )
            if value is not None and getattr(record, key) != value
        }
        if updates:
            record = self._positions.update_position(record.id, **updates)
        return record


__all__ = ["ExtractionSync"]
