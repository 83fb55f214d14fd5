"""SQLite persistence for positions, bullets, job drafts, telemetry runs and interview sessions."""
from .account import reset_account_data
from .bullets import BulletMatch, BulletRecord, BulletStore, BulletWithPosition, PositionRef
from .job_drafts import JobDraftRecord, JobDraftStore, JobDraftWithBullets
from .migrate import migrate
from .positions import PositionRecord, PositionStore
from .runs import RunRecord, RunStore, RunType
from .sessions import SessionRecord, SessionStore
from .sqlite import Database, RecordNotFound

__all__ = [
    "BulletMatch",
    "BulletRecord",
    "BulletStore",
    "BulletWithPosition",
    "Database",
    "JobDraftRecord",
    "JobDraftStore",
    "JobDraftWithBullets",
    "PositionRecord",
    "PositionRef",
    "PositionStore",
    "RecordNotFound",
    "RunRecord",
    "RunStore",
    "RunType",
    "SessionRecord",
    "SessionStore",
    "migrate",
    "reset_account_data",
]
