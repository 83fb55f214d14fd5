"""Helpers for bootstrapping, loading and advancing interview sessions."""
from __future__ import annotations

import logging
import uuid
from functools import partial
from typing import Dict, List, Optional, Sequence

from config import INTERVIEW_ROUTE, AppConfig, Settings, get_route
from contracts import ChatMessage, InterviewState, StepResponse
from interview_session import (
    PROMPT_ID,
    Completer,
    FailurePolicy,
    InterviewSession,
    OPENING_MESSAGE,
    ScriptedInterviewModel,
    SessionNotFound,
    TurnResult,
    start_state,
)
from llm_gateway import HttpClient, complete_chat
from observability import log_event
from storage import RunStore, SessionRecord, SessionStore

from .extraction_sync import ExtractionSync
from .telemetry import RunLogger

logger = logging.getLogger(__name__)


def build_completer(cfg: Settings, app_config: AppConfig, client: Optional[HttpClient]) -> Completer:
    """Return the scripted model when mocking is enabled, else the hosted chat route."""

    if cfg.USE_MOCK_INTERVIEW:
        logger.info("Interview completer uses the scripted model")
        return ScriptedInterviewModel()
    return partial(complete_chat, cfg=get_route(app_config, INTERVIEW_ROUTE), client=client)


def new_session(store: SessionStore, user_id: str, *, opening: Optional[str] = OPENING_MESSAGE) -> SessionRecord:
    """Create and persist a fresh session with a generated identifier."""

    session_id = str(uuid.uuid4())
    record = store.save_session(session_id, user_id, start_state(opening))
    log_event("session_start", session_id, status=record.state.status)
    return record


def load_session(store: SessionStore, session_id: str, user_id: str) -> SessionRecord:
    """Load ``session_id``; sessions owned by another user are reported as missing."""

    record = store.load_session(session_id)
    if record is None or record.user_id != user_id:
        raise SessionNotFound(f"session {session_id} not found")
    return record


def run_turn(
    store: SessionStore,
    record: SessionRecord,
    message: str,
    *,
    complete: Completer,
    runs: Optional[RunStore] = None,
    sync: Optional[ExtractionSync] = None,
    failure_policy: FailurePolicy = "error",
    telemetry_window: int = 5,
    prompt_id: str = PROMPT_ID,
) -> TurnResult:
    """Submit one user message and persist the resulting state.

    The state is saved whether or not the turn succeeds, so a failed turn keeps the
    user message and its terminal status.
    """

    session = InterviewSession(
        record.session_id,
        record.state,
        complete,
        failure_policy=failure_policy,
        recorder=partial(RunLogger, runs, record.user_id, "interview", prompt_id),
        telemetry_window=telemetry_window,
    )
    try:
        result = session.submit(message)
    finally:
        store.save_session(record.session_id, record.user_id, session.state)

    if sync is not None:
        sync.persist(result.state)
        if result.state.status == "completed":
            finalized = sync.finalize(result.state)
            log_event("session_complete", record.session_id, bullets=finalized)
    return result


def stateless_step(
    messages: Sequence[Dict[str, str]],
    *,
    user_id: str,
    complete: Completer,
    runs: Optional[RunStore] = None,
    telemetry_window: int = 5,
    prompt_id: str = PROMPT_ID,
) -> StepResponse:
    """Run one turn over a client-held transcript ending with the user's message."""

    if not messages:
        raise ValueError("messages must not be empty")
    *history, last = messages
    if last.get("role") != "user":
        raise ValueError("last message must come from the user")
    prior: List[ChatMessage] = [
        ChatMessage.create(entry["role"], entry.get("content", "")) for entry in history if entry.get("role") != "system"
    ]
    session = InterviewSession(
        f"stateless-{uuid.uuid4().hex[:8]}",
        InterviewState(messages=prior),
        complete,
        recorder=partial(RunLogger, runs, user_id, "interview", prompt_id),
        telemetry_window=telemetry_window,
    )
    return session.submit(last.get("content", "")).step


__all__ = ["build_completer", "load_session", "new_session", "run_turn", "stateless_step"]
