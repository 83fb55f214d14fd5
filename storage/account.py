"""Account-wide data removal."""
from __future__ import annotations

import logging
from typing import Dict

from .sqlite import Database

logger = logging.getLogger(__name__)

_OWNED_TABLES = ("job_drafts", "bullets", "positions", "runs", "interview_sessions")


def reset_account_data(db: Database, user_id: str) -> Dict[str, int]:
    """Delete every row owned by ``user_id`` in one transaction; returns counts per table."""

    deleted: Dict[str, int] = {}
    with db.connect() as conn:
        for table in _OWNED_TABLES:
            cur = conn.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))
            deleted[table] = cur.rowcount
    logger.info("Account data reset user=%s deleted=%s", user_id, deleted)
    return deleted
