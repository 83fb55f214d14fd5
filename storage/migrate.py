"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS positions (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  company TEXT NOT NULL,
  title TEXT NOT NULL,
  location TEXT,
  start_date TEXT,
  end_date TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS bullets (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  position_id TEXT REFERENCES positions(id) ON DELETE CASCADE,
  original_text TEXT NOT NULL,
  current_text TEXT NOT NULL,
  category TEXT,
  hard_skills TEXT NOT NULL DEFAULT '[]',
  soft_skills TEXT NOT NULL DEFAULT '[]',
  metrics TEXT,
  assumptions TEXT,
  is_draft INTEGER NOT NULL DEFAULT 0,
  was_edited INTEGER NOT NULL DEFAULT 0,
  embedding TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS runs (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  type TEXT NOT NULL,
  prompt_id TEXT,
  model TEXT,
  input TEXT,
  output TEXT,
  success INTEGER NOT NULL,
  latency_ms INTEGER,
  tokens_in INTEGER,
  tokens_out INTEGER,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  session_id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  status TEXT NOT NULL,
  state_json TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS job_drafts (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  job_title TEXT,
  company TEXT,
  jd_text TEXT NOT NULL,
  jd_embedding TEXT,
  retrieved_bullet_ids TEXT NOT NULL DEFAULT '[]',
  selected_bullet_ids TEXT NOT NULL DEFAULT '[]',
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS idx_positions_user ON positions(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_bullets_user ON bullets(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_bullets_position ON bullets(position_id);",
    "CREATE INDEX IF NOT EXISTS idx_runs_user ON runs(user_id, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_sessions_user ON interview_sessions(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_job_drafts_user ON job_drafts(user_id, created_at);",
]


def migrate(db_path: str = "data/odie.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
