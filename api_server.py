from __future__ import annotations  # FastAPI server for the Odie interview service

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import (
    AppServices,
    SupabaseTokenVerifier,
    TokenVerifier,
    install_error_handlers,
    jobs_router,
    library_router,
    media_router,
    router,
)
from config import AppConfig, Settings, resolve_config, settings
from interview_session import Completer
from llm_gateway import HttpClient
from services import build_completer
from storage import Database

logger = logging.getLogger(__name__)


def create_app(
    cfg: Optional[Settings] = None,
    *,
    app_config: Optional[AppConfig] = None,
    http_client: Optional[HttpClient] = None,
    verifier: Optional[TokenVerifier] = None,
    completer: Optional[Completer] = None,
) -> FastAPI:
    """Build the application; handles not passed in are created from ``cfg``."""

    cfg = cfg or settings
    app_config = app_config or resolve_config(cfg)
    owned_client: Optional[httpx.Client] = None
    if http_client is None or verifier is None:
        owned_client = httpx.Client(timeout=cfg.LLM_TIMEOUT_S)
    http = http_client if http_client is not None else owned_client

    db = Database(cfg.DB_PATH)
    db.migrate()
    services = AppServices(
        settings=cfg,
        app_config=app_config,
        db=db,
        http=http,
        complete=completer or build_completer(cfg, app_config, http),
        verifier=verifier or SupabaseTokenVerifier(cfg.SUPABASE_URL, cfg.SUPABASE_ANON_KEY, owned_client),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Odie API starting db=%s mock_interview=%s", cfg.DB_PATH, cfg.USE_MOCK_INTERVIEW)
        yield
        if owned_client is not None:
            owned_client.close()
        logger.info("Odie API stopped")

    app = FastAPI(title="Odie Interview API", lifespan=lifespan)
    app.state.services = services
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    app.include_router(router)
    app.include_router(media_router)
    app.include_router(library_router)
    app.include_router(jobs_router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
