from __future__ import annotations  # Hosted model request gateway

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

import httpx
from pydantic import BaseModel

from config import LlmRoute
from observability import span


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, **kwargs: Any) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...

    @property
    def content(self) -> bytes: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class GatewayNotConfigured(LlmGatewayError):  # Route has no usable credentials
    pass


class UpstreamFailure(LlmGatewayError):
    """A hosted API call failed in transport or answered with a non-success status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, route: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.route = route


class Completion(BaseModel):  # Raw chat completion returned by the model
    content: str
    model: str
    tokens_in: Optional[int] = None
    tokens_out: Optional[int] = None
    latency_ms: int = 0


def complete_chat(
    messages: Sequence[Dict[str, str]],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    system_prompt: Optional[str] = None,
) -> Completion:  # Send one chat completion request, no retries
    base_messages: List[Dict[str, str]] = []
    if system_prompt:
        base_messages.append({"role": "system", "content": system_prompt})
    base_messages.extend(_normalize_messages(messages))
    payload: Dict[str, Any] = {"model": cfg.model, "messages": base_messages}
    payload.update(cfg.options)
    if cfg.response_format:
        payload["response_format"] = {"type": cfg.response_format}
    preview = _preview(base_messages[-1:])
    logger.info("LLM request start route=%s model=%s messages=%d preview=%s", cfg.name, cfg.model, len(base_messages), preview)
    with span(cfg.name) as timing:
        response = send(cfg, client, json=payload)
    data = _json_body(cfg, response)
    content = _extract_content(data)
    if content is None:
        raise UpstreamFailure("LLM response missing content", route=cfg.name)
    usage = data.get("usage") or {}
    logger.info("LLM request done route=%s model=%s ms=%d", cfg.name, cfg.model, timing.ms)
    return Completion(
        content=content,
        model=str(data.get("model") or cfg.model),
        tokens_in=usage.get("prompt_tokens"),
        tokens_out=usage.get("completion_tokens"),
        latency_ms=timing.ms,
    )


def send(cfg: LlmRoute, client: Optional[HttpClient], **request: Any) -> HttpResponse:
    """POST to the route and return the response, raising on transport or HTTP errors."""
    headers = _headers(cfg, json_body="json" in request)
    try:
        response, close_cb = _post(cfg.url, headers, cfg.timeout_s, client, **request)
    except httpx.HTTPError as exc:
        logger.error("LLM transport failure route=%s: %s", cfg.name, exc)
        raise UpstreamFailure(f"{cfg.name} request failed: {exc}", route=cfg.name) from exc
    try:
        if response.status_code >= 400:
            logger.error("LLM error status route=%s status=%s body=%s", cfg.name, response.status_code, response.text[:500])
            raise UpstreamFailure(
                f"Upstream API error: {response.status_code}",
                status_code=response.status_code,
                route=cfg.name,
            )
        # Read the body before the default transport closes.
        _ = response.content
    finally:
        _close_safely(close_cb)
    return response


def _headers(cfg: LlmRoute, *, json_body: bool) -> Dict[str, str]:  # Build auth and content headers
    api_key = cfg.api_key or (os.getenv(cfg.api_key_env) if cfg.api_key_env else None)
    if not api_key:
        raise GatewayNotConfigured(f"API key not configured for route '{cfg.name}'")
    headers = {"Authorization": f"Bearer {api_key}"}
    if json_body:
        headers["Content-Type"] = "application/json"
    headers.update(cfg.extra_headers)
    return headers


def _post(
    url: str,
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
    **request: Any,
) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.post(url, headers=headers, timeout=timeout, **request), None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, headers=headers, **request)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _json_body(cfg: LlmRoute, response: HttpResponse) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        logger.error("Invalid JSON payload from route=%s: %s", cfg.name, exc)
        raise UpstreamFailure(f"{cfg.name} payload was not JSON", route=cfg.name) from exc
    if not isinstance(data, dict):
        raise UpstreamFailure(f"{cfg.name} payload was not a JSON object", route=cfg.name)
    return data


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> List[Dict[str, str]]:  # Ensure message payload shape
    normalized: List[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # Build preview string for logging
    for message in messages:
        text = message.get("content", "").strip()
        if text:
            line = text.splitlines()[0]
            return line if len(line) <= 120 else line[:117] + "..."
    return ""


def _extract_content(data: Dict[str, Any]) -> Optional[str]:  # Extract message content from chat response
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str):
            return content
    if isinstance(data.get("content"), str):
        return data["content"]
    return None
