"""Configuration package for the interview service."""
from .llm import (
    EMBED_ROUTE,
    INTERVIEW_ROUTE,
    SPEAK_ROUTE,
    TRANSCRIBE_ROUTE,
    AppConfig,
    LlmRoute,
    default_config,
    get_route,
    load_config,
    resolve_config,
)
from .settings import Settings, settings

__all__ = [
    "EMBED_ROUTE",
    "INTERVIEW_ROUTE",
    "SPEAK_ROUTE",
    "TRANSCRIBE_ROUTE",
    "AppConfig",
    "LlmRoute",
    "default_config",
    "get_route",
    "load_config",
    "resolve_config",
    "Settings",
    "settings",
]
