"""Bearer-token authentication for the HTTP API."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

import httpx
from fastapi import Header, Request

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthFailure(Exception):  # Missing or rejected credentials
    pass


class TokenVerifier(Protocol):  # Resolves an access token to a user id
    def verify(self, token: str) -> str: ...


def extract_bearer_token(header: Optional[str]) -> str:
    if not header:
        raise AuthFailure("Missing authorization header")
    token = header[len(BEARER_PREFIX):] if header.startswith(BEARER_PREFIX) else header
    token = token.strip()
    if not token:
        raise AuthFailure("Invalid token")
    return token


class SupabaseTokenVerifier:
    """Asks the hosted auth provider who owns ``token``."""

    def __init__(
        self,
        base_url: Optional[str],
        anon_key: Optional[str],
        client: httpx.Client,
        *,
        timeout_s: float = 10.0,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._anon_key = anon_key
        self._client = client
        self._timeout_s = timeout_s

    def verify(self, token: str) -> str:
        if not self._base_url:
            logger.error("Token verification attempted without SUPABASE_URL")
            raise AuthFailure("Invalid token")
        headers = {"Authorization": f"{BEARER_PREFIX}{token}"}
        if self._anon_key:
            headers["apikey"] = self._anon_key
        try:
            response = self._client.get(f"{self._base_url}/auth/v1/user", headers=headers, timeout=self._timeout_s)
        except httpx.HTTPError as exc:
            logger.warning("Auth provider unreachable: %s", exc)
            raise AuthFailure("Invalid token") from exc
        if response.status_code != 200:
            raise AuthFailure("Invalid token")
        user_id = (response.json() or {}).get("id")
        if not user_id:
            raise AuthFailure("Invalid token")
        return str(user_id)


class StaticTokenVerifier:
    """Fixed token to user mapping, for local runs and tests."""

    def __init__(self, tokens: Dict[str, str]) -> None:
        self._tokens = dict(tokens)

    def verify(self, token: str) -> str:
        try:
            return self._tokens[token]
        except KeyError:
            raise AuthFailure("Invalid token") from None


def current_user(request: Request, authorization: Optional[str] = Header(default=None)) -> str:
    """FastAPI dependency returning the authenticated user id."""

    token = extract_bearer_token(authorization)
    return request.app.state.services.verifier.verify(token)


__all__ = [
    "AuthFailure",
    "StaticTokenVerifier",
    "SupabaseTokenVerifier",
    "TokenVerifier",
    "current_user",
    "extract_bearer_token",
]
