from __future__ import annotations  # Configuration schema for hosted model routes

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .settings import Settings

INTERVIEW_ROUTE = "interview"
EMBED_ROUTE = "embed"
TRANSCRIBE_ROUTE = "transcribe"
SPEAK_ROUTE = "speak"


class LlmRoute(BaseModel):  # Hosted endpoint configuration
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    api_key: Optional[str] = Field(default=None, repr=False)
    api_key_env: str | None = None
    response_format: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.endpoint}"


class AppConfig(BaseModel):  # Application configuration root
    llm_routes: Dict[str, LlmRoute]


def load_config(path: Path) -> AppConfig:  # Load configuration from disk
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def default_config(cfg: Settings) -> AppConfig:  # Build routes from environment settings
    common: Dict[str, Any] = {
        "base_url": cfg.OPENAI_BASE_URL,
        "timeout_s": cfg.LLM_TIMEOUT_S,
        "api_key": cfg.OPENAI_API_KEY,
        "api_key_env": "OPENAI_API_KEY",
    }
    routes = {
        INTERVIEW_ROUTE: LlmRoute(
            name=INTERVIEW_ROUTE,
            endpoint="/chat/completions",
            model=cfg.INTERVIEW_MODEL,
            response_format="json_object",
            options={"temperature": cfg.INTERVIEW_TEMPERATURE, "max_tokens": cfg.INTERVIEW_MAX_TOKENS},
            **common,
        ),
        EMBED_ROUTE: LlmRoute(
            name=EMBED_ROUTE,
            endpoint="/embeddings",
            model=cfg.EMBED_MODEL,
            options={"dimensions": cfg.EMBED_DIMENSIONS},
            **common,
        ),
        TRANSCRIBE_ROUTE: LlmRoute(
            name=TRANSCRIBE_ROUTE,
            endpoint="/audio/transcriptions",
            model=cfg.TRANSCRIBE_MODEL,
            **common,
        ),
        SPEAK_ROUTE: LlmRoute(
            name=SPEAK_ROUTE,
            endpoint="/audio/speech",
            model=cfg.SPEAK_MODEL,
            options={"response_format": "mp3"},
            **common,
        ),
    }
    return AppConfig(llm_routes=routes)


def resolve_config(cfg: Settings) -> AppConfig:  # File config when configured, else defaults
    if cfg.APP_CONFIG_PATH:
        return load_config(Path(cfg.APP_CONFIG_PATH))
    return default_config(cfg)


def get_route(app_config: AppConfig, name: str) -> LlmRoute:
    if name not in app_config.llm_routes:
        raise KeyError(f"Route '{name}' missing from configuration")
    return app_config.llm_routes[name]
