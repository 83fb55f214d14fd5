"""FastAPI routes for interview turns and session control."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from contracts import StepResponse
from services import load_session, new_session, run_turn, stateless_step

from .auth import current_user
from .deps import AppServices, get_services
from .errors import ValidationFailure
from .schemas import InterviewRequest, SessionView, TurnRequest, TurnView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/interview", response_model=StepResponse, response_model_by_alias=True)
def interview_step(
    req: InterviewRequest,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> StepResponse:  # One turn over a client-held transcript
    last = req.messages[-1]
    if last.role != "user":
        raise ValidationFailure("Last message must come from the user")
    if not last.content.strip():
        raise ValidationFailure("Message cannot be empty")
    return stateless_step(
        [message.model_dump() for message in req.messages],
        user_id=user_id,
        complete=services.complete,
        runs=services.runs,
        telemetry_window=services.settings.TELEMETRY_INPUT_MESSAGES,
        prompt_id=services.settings.INTERVIEW_PROMPT_ID,
    )


@router.post("/interview-sessions/start", response_model=SessionView, response_model_by_alias=True)
def start(
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> SessionView:
    record = new_session(services.sessions, user_id)
    logger.info("Session started session=%s user=%s", record.session_id, user_id)
    return SessionView.from_record(record)


@router.post("/interview-sessions/{session_id}/turn", response_model=TurnView, response_model_by_alias=True)
def turn(
    session_id: str,
    req: TurnRequest,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> TurnView:
    record = load_session(services.sessions, session_id, user_id)
    if not req.message.strip():
        raise ValidationFailure("Message cannot be empty")
    result = run_turn(
        services.sessions,
        record,
        req.message,
        complete=services.complete,
        runs=services.runs,
        sync=services.extraction_sync(user_id),
        failure_policy=services.settings.SESSION_FAILURE_POLICY,
        telemetry_window=services.settings.TELEMETRY_INPUT_MESSAGES,
        prompt_id=services.settings.INTERVIEW_PROMPT_ID,
    )
    return TurnView.from_result(session_id, result)


@router.get("/interview-sessions/{session_id}", response_model=SessionView, response_model_by_alias=True)
def fetch(
    session_id: str,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> SessionView:
    return SessionView.from_record(load_session(services.sessions, session_id, user_id))
