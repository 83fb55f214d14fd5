from __future__ import annotations  # Speech-to-text and text-to-speech requests

import logging
from typing import Optional

from pydantic import BaseModel

from config import LlmRoute
from observability import span

from .llm_gateway import HttpClient, UpstreamFailure, _json_body, send

logger = logging.getLogger(__name__)


class Transcription(BaseModel):
    text: str
    model: str
    latency_ms: int = 0


class Speech(BaseModel):
    audio: bytes
    media_type: str = "audio/mpeg"
    model: str
    latency_ms: int = 0


def transcribe_audio(
    audio: bytes,
    *,
    filename: str,
    content_type: str,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> Transcription:
    files = {"file": (filename, audio, content_type)}
    with span(cfg.name) as timing:
        response = send(cfg, client, files=files, data={"model": cfg.model})
    data = _json_body(cfg, response)
    text = data.get("text")
    if not isinstance(text, str):
        raise UpstreamFailure("Transcription response missing text", route=cfg.name)
    logger.info("Transcription done route=%s bytes=%d chars=%d ms=%d", cfg.name, len(audio), len(text), timing.ms)
    return Transcription(text=text, model=cfg.model, latency_ms=timing.ms)


def synthesize_speech(
    text: str,
    *,
    voice: str,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> Speech:
    payload = {"model": cfg.model, "input": text, "voice": voice, **cfg.options}
    with span(cfg.name) as timing:
        response = send(cfg, client, json=payload)
    audio = response.content
    logger.info("Speech done route=%s chars=%d bytes=%d ms=%d", cfg.name, len(text), len(audio), timing.ms)
    return Speech(audio=audio, model=cfg.model, latency_ms=timing.ms)
