"""Structured output contract for the interview model."""
from .errors import ContractError, MalformedResponse, SchemaViolation
from .interview import (
    BULLET_MIN_LENGTH,
    Bullet,
    ChatMessage,
    ContractModel,
    InterviewOutput,
    InterviewState,
    MessageRole,
    Metrics,
    Position,
    PositionWithBullets,
    SessionStatus,
    StepResponse,
    position_key,
)
from .validation import (
    Validated,
    parse_step_response,
    validate_interview_output,
    validate_interview_state,
    validate_payload,
    validate_step_response,
    validate_text,
)

__all__ = [
    "BULLET_MIN_LENGTH",
    "Bullet",
    "ChatMessage",
    "ContractError",
    "ContractModel",
    "InterviewOutput",
    "InterviewState",
    "MalformedResponse",
    "MessageRole",
    "Metrics",
    "Position",
    "PositionWithBullets",
    "SchemaViolation",
    "SessionStatus",
    "StepResponse",
    "Validated",
    "parse_step_response",
    "position_key",
    "validate_interview_output",
    "validate_interview_state",
    "validate_payload",
    "validate_step_response",
    "validate_text",
]
