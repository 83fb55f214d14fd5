"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/odie.db")
    APP_CONFIG_PATH: Optional[str] = None

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    LLM_TIMEOUT_S: float = Field(default=60.0, ge=0.1)

    INTERVIEW_MODEL: str = "gpt-4o"
    INTERVIEW_PROMPT_ID: str = "interview_v1"
    INTERVIEW_TEMPERATURE: float = 0.7
    INTERVIEW_MAX_TOKENS: int = 2000
    USE_MOCK_INTERVIEW: bool = False
    SESSION_FAILURE_POLICY: Literal["error", "continue"] = "error"

    EMBED_MODEL: str = "text-embedding-3-small"
    EMBED_DIMENSIONS: int = 1536
    EMBED_MAX_CHARS: int = 8000

    TRANSCRIBE_MODEL: str = "whisper-1"
    MAX_AUDIO_BYTES: int = 25 * 1024 * 1024

    SPEAK_MODEL: str = "tts-1"
    SPEAK_MAX_CHARS: int = 4096
    SPEAK_DEFAULT_VOICE: str = "nova"

    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None

    JD_MATCH_COUNT: int = Field(default=50, ge=1)
    JD_MATCH_THRESHOLD: float = Field(default=0.3, ge=-1.0, le=1.0)
    JD_PRESELECT_COUNT: int = Field(default=10, ge=0)

    TELEMETRY_INPUT_MESSAGES: int = 5
    TELEMETRY_TEXT_CHARS: int = 500

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)


settings = Settings()
