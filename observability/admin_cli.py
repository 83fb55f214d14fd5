"""Lightweight CLI helpers for inspecting telemetry runs and interview sessions."""
from __future__ import annotations

import argparse
import sqlite3
from typing import List, Optional

from config.settings import settings


def tail_runs(limit: int = 20, db_path: Optional[str] = None) -> List[str]:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT created_at, user_id, type, model, success, latency_ms, tokens_in, tokens_out
            FROM runs
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        lines = []
        for row in cursor.fetchall():
            ts, user_id, run_type, model, success, latency_ms, tokens_in, tokens_out = row
            outcome = "ok" if success else "FAILED"
            lines.append(
                f"[{ts}] {user_id} {run_type} model={model} {outcome} ms={latency_ms} tokens={tokens_in}/{tokens_out}"
            )
        return lines
    finally:
        conn.close()


def tail_sessions(limit: int = 20, db_path: Optional[str] = None) -> List[str]:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT updated_at, session_id, user_id, status
            FROM interview_sessions
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        return [f"[{ts}] {session_id} user={user_id} status={status}" for ts, session_id, user_id, status in cursor.fetchall()]
    finally:
        conn.close()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-runs", type=int, help="Show the latest telemetry runs")
    parser.add_argument("--tail-sessions", type=int, help="Show the most recently updated interview sessions")
    parser.add_argument("--db", help="SQLite file to read instead of DB_PATH")
    args = parser.parse_args()

    if args.tail_runs:
        print("\n".join(tail_runs(args.tail_runs, args.db)))
    if args.tail_sessions:
        print("\n".join(tail_sessions(args.tail_sessions, args.db)))


if __name__ == "__main__":
    main()
