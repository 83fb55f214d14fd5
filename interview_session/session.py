"""Interview session lifecycle.

One :class:`InterviewSession` wraps one :class:`~contracts.InterviewState` and drives it
turn by turn. Callers must serialize :meth:`InterviewSession.submit` per session; the
only blocking point is the call to the hosted model.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Literal, Optional, Protocol, Sequence

from pydantic import BaseModel, Field

from contracts import (
    ChatMessage,
    ContractError,
    InterviewState,
    PositionWithBullets,
    StepResponse,
    validate_step_response,
)
from llm_gateway import Completion, LlmGatewayError
from observability import log_event

from .merge import merge_step
from .prompt import INTERVIEW_SYSTEM_PROMPT, OPENING_MESSAGE

logger = logging.getLogger(__name__)

FailurePolicy = Literal["error", "continue"]
Completer = Callable[[Sequence[Dict[str, str]]], Completion]


class SessionClosed(RuntimeError):
    """Raised when a turn is submitted to a session that is no longer in progress."""

    def __init__(self, session_id: str, status: str) -> None:
        if status == "completed":
            message = "session already completed"
        else:
            message = f"session ended with status '{status}'"
        super().__init__(message)
        self.session_id = session_id
        self.status = status


class SessionNotFound(LookupError):
    pass


class TurnRecorder(Protocol):  # Telemetry sink for one model call
    def success(self, **fields: Any) -> Any: ...

    def failure(self, **fields: Any) -> Any: ...


class TurnResult(BaseModel):  # Outcome of one successful turn
    step: StepResponse
    reply: ChatMessage
    state: InterviewState
    added: List[PositionWithBullets] = Field(default_factory=list)


def start_state(opening: Optional[str] = OPENING_MESSAGE) -> InterviewState:
    """Return a fresh in-progress state, optionally seeded with the assistant greeting."""
    messages = [ChatMessage.create("assistant", opening, message_id="initial")] if opening else []
    return InterviewState(messages=messages)


class InterviewSession:
    def __init__(
        self,
        session_id: str,
        state: InterviewState,
        complete: Completer,
        *,
        system_prompt: str = INTERVIEW_SYSTEM_PROMPT,
        failure_policy: FailurePolicy = "error",
        recorder: Optional[Callable[[], TurnRecorder]] = None,
        telemetry_window: int = 5,
    ) -> None:
        self.session_id = session_id
        self.state = state
        self._complete = complete
        self._system_prompt = system_prompt
        self._failure_policy = failure_policy
        self._recorder = recorder
        self._telemetry_window = telemetry_window

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def is_open(self) -> bool:
        return self.state.status == "in_progress"

    def submit(self, content: str) -> TurnResult:
        """Run one turn: record the user message, ask the model, merge its extraction.

        Raises :class:`SessionClosed` when the session is finished, the gateway's
        :class:`~llm_gateway.UpstreamFailure` when the call fails, and
        :class:`~contracts.MalformedResponse` / :class:`~contracts.SchemaViolation`
        when the reply breaks the contract. Failed turns keep the user message and
        leave the extracted data untouched.
        """
        if not self.is_open:
            raise SessionClosed(self.session_id, self.state.status)
        if not content or not content.strip():
            raise ValueError("message content must not be empty")

        self.state.messages.append(ChatMessage.create("user", content))
        turn = sum(1 for message in self.state.messages if message.role == "user")
        recorder = self._recorder() if self._recorder else None
        telemetry_input = {"messages": self._transcript()[-self._telemetry_window:]}

        try:
            completion = self._complete(self._model_messages())
        except LlmGatewayError as exc:
            self._fail(exc, turn, recorder, telemetry_input, model=None)
            raise

        validated = validate_step_response(completion.content)
        if not validated.ok:
            self._fail(validated.error, turn, recorder, telemetry_input, model=completion.model)
            raise validated.error
        step = validated.unwrap()

        if recorder is not None:
            recorder.success(
                model=completion.model,
                input=telemetry_input,
                output=step.model_dump(by_alias=True, mode="json"),
                latency_ms=completion.latency_ms or None,
                tokens_in=completion.tokens_in,
                tokens_out=completion.tokens_out,
            )

        reply = ChatMessage.create("assistant", step.response)
        self.state.messages.append(reply)
        added = merge_step(self.state, step)
        if not step.should_continue:
            self.state.status = "completed"
        if self.state.extracted_data is not None:
            self.state.extracted_data.is_complete = not step.should_continue
            self.state.extracted_data.next_question = step.response if step.should_continue else None

        log_event(
            "turn",
            self.session_id,
            status=self.state.status,
            turn=turn,
            positions=len(self.state.positions),
            bullets=sum(len(entry.bullets) for entry in self.state.positions),
            index=self.state.current_position_index,
        )
        return TurnResult(step=step, reply=reply, state=self.state, added=added)

    def _fail(
        self,
        exc: Exception,
        turn: int,
        recorder: Optional[TurnRecorder],
        telemetry_input: Dict[str, Any],
        *,
        model: Optional[str],
    ) -> None:
        if self._failure_policy == "error":
            self.state.status = "error"
        logger.warning("Interview turn failed session=%s turn=%d: %s", self.session_id, turn, exc)
        log_event(
            "turn_failed",
            self.session_id,
            level=logging.WARNING,
            status=self.state.status,
            turn=turn,
            error=str(exc),
        )
        if recorder is not None:
            recorder.failure(model=model, input=telemetry_input, error=str(exc))

    def _transcript(self) -> List[Dict[str, str]]:
        return [{"role": message.role, "content": message.content} for message in self.state.messages]

    def _model_messages(self) -> List[Dict[str, str]]:
        return [{"role": "system", "content": self._system_prompt}, *self._transcript()]


__all__ = [
    "Completer",
    "FailurePolicy",
    "InterviewSession",
    "SessionClosed",
    "SessionNotFound",
    "TurnRecorder",
    "TurnResult",
    "start_state",
]
