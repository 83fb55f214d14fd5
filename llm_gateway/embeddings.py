from __future__ import annotations  # Embedding requests

import logging
from typing import List, Optional

from pydantic import BaseModel

from config import LlmRoute
from observability import span

from .llm_gateway import HttpClient, UpstreamFailure, _json_body, send

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 8000


class Embedding(BaseModel):
    vector: List[float]
    model: str
    tokens: Optional[int] = None
    latency_ms: int = 0


def embed_text(
    text: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    max_chars: int = MAX_INPUT_CHARS,
) -> Embedding:
    payload = {"model": cfg.model, "input": text[:max_chars], **cfg.options}
    with span(cfg.name) as timing:
        response = send(cfg, client, json=payload)
    data = _json_body(cfg, response)
    try:
        vector = data["data"][0]["embedding"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamFailure("Embedding response missing data", route=cfg.name) from exc
    usage = data.get("usage") or {}
    logger.info("Embedding done route=%s dims=%d ms=%d", cfg.name, len(vector), timing.ms)
    return Embedding(vector=vector, model=cfg.model, tokens=usage.get("total_tokens"), latency_ms=timing.ms)
