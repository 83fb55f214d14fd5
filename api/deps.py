"""Application-scoped handles shared by the routers."""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from config import AppConfig, LlmRoute, Settings, get_route
from interview_session import Completer
from llm_gateway import HttpClient
from services import ExtractionSync
from storage import BulletStore, Database, JobDraftStore, PositionStore, RunStore, SessionStore

from .auth import TokenVerifier


class AppServices:
    """Built once per application lifespan and reached through ``app.state.services``."""

    def __init__(
        self,
        *,
        settings: Settings,
        app_config: AppConfig,
        db: Database,
        http: Optional[HttpClient],
        complete: Completer,
        verifier: TokenVerifier,
    ) -> None:
        self.settings = settings
        self.app_config = app_config
        self.db = db
        self.http = http
        self.complete = complete
        self.verifier = verifier
        self.positions = PositionStore(db)
        self.bullets = BulletStore(db)
        self.runs = RunStore(db)
        self.sessions = SessionStore(db)
        self.job_drafts = JobDraftStore(db)

    def route(self, name: str) -> LlmRoute:
        return get_route(self.app_config, name)

    def extraction_sync(self, user_id: str) -> ExtractionSync:
        return ExtractionSync(self.positions, self.bullets, user_id)


def get_services(request: Request) -> AppServices:
    return request.app.state.services


__all__ = ["AppServices", "get_services"]
