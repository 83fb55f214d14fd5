from __future__ import annotations  # Re-export llm_gateway public API

from .audio import Speech, Transcription, synthesize_speech, transcribe_audio
from .embeddings import Embedding, embed_text
from .llm_gateway import (
    Completion,
    GatewayNotConfigured,
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    UpstreamFailure,
    complete_chat,
)

__all__ = [
    "Completion",
    "Embedding",
    "GatewayNotConfigured",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "Speech",
    "Transcription",
    "UpstreamFailure",
    "complete_chat",
    "embed_text",
    "synthesize_speech",
    "transcribe_audio",
]
