"""Boundary errors and their translation into ``{"error": message}`` responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contracts import ContractError
from interview_session import SessionClosed, SessionNotFound
from llm_gateway import GatewayNotConfigured, UpstreamFailure
from storage import RecordNotFound

from .auth import AuthFailure

logger = logging.getLogger(__name__)


class ValidationFailure(ValueError):  # Request input rejected at the boundary
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _handler(status_code: int, *, log_level: int = logging.INFO):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        logger.log(log_level, "%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return error_response(status_code, str(exc))

    return handle


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or "body"
    message = f"Invalid request: {field} {first.get('msg', 'is invalid')}"
    logger.info("%s %s -> 400: %s", request.method, request.url.path, message)
    return error_response(400, message)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthFailure, _handler(401))
    app.add_exception_handler(ValidationFailure, _handler(400))
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(SessionNotFound, _handler(404))
    app.add_exception_handler(RecordNotFound, _handler(404))
    app.add_exception_handler(SessionClosed, _handler(409))
    app.add_exception_handler(ContractError, _handler(502, log_level=logging.WARNING))
    app.add_exception_handler(UpstreamFailure, _handler(502, log_level=logging.WARNING))
    app.add_exception_handler(GatewayNotConfigured, _handler(500, log_level=logging.ERROR))


__all__ = ["ValidationFailure", "error_response", "install_error_handlers"]
