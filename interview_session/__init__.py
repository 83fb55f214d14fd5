"""Interview session lifecycle, prompt and scripted model."""
from .merge import merge_step
from .mock import ScriptedInterviewModel
from .prompt import INTERVIEW_SYSTEM_PROMPT, OPENING_MESSAGE, PROMPT_ID
from .session import (
    Completer,
    FailurePolicy,
    InterviewSession,
    SessionClosed,
    SessionNotFound,
    TurnRecorder,
    TurnResult,
    start_state,
)

__all__ = [
    "Completer",
    "FailurePolicy",
    "INTERVIEW_SYSTEM_PROMPT",
    "InterviewSession",
    "OPENING_MESSAGE",
    "PROMPT_ID",
    "ScriptedInterviewModel",
    "SessionClosed",
    "SessionNotFound",
    "TurnRecorder",
    "TurnResult",
    "merge_step",
    "start_state",
]
