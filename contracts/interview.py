"""Interview contract models for structured model output and session state.

Wire names are camelCase (``startDate``, ``shouldContinue``); Python attributes are
snake_case. Dump with ``by_alias=True`` when emitting JSON for the model or a client.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

MessageRole = Literal["user", "assistant", "system"]
SessionStatus = Literal["in_progress", "completed", "error"]

BULLET_MIN_LENGTH = 10


class ContractModel(BaseModel):  # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _list_or_empty(value: Any) -> Any:
    return [] if value is None else value


class Position(ContractModel):
    company: str = Field(min_length=1)
    title: str = Field(min_length=1)
    location: Optional[str] = None
    start_date: Optional[str] = None  # YYYY-MM
    end_date: Optional[str] = None  # YYYY-MM, None while the role is current

    def identity(self) -> tuple[str, str]:
        """Return the normalized (company, title) pair used to match positions."""
        return position_key(self.company, self.title)


class Metrics(ContractModel):
    value: Optional[str] = None  # "40%", "$2M", "10k users"
    type: Optional[str] = None  # "latency", "revenue", "adoption"

    @field_validator("value", "type", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Bullet(ContractModel):
    text: str = Field(min_length=BULLET_MIN_LENGTH)
    category: Optional[str] = None
    hard_skills: List[str] = Field(default_factory=list)
    soft_skills: List[str] = Field(default_factory=list)
    metrics: Optional[Metrics] = None
    assumptions: Optional[str] = None  # set when the model inferred unstated facts

    @field_validator("hard_skills", "soft_skills", mode="before")
    @classmethod
    def _empty_skills(cls, value: Any) -> Any:
        return _list_or_empty(value)


class PositionWithBullets(ContractModel):
    position: Position
    bullets: List[Bullet] = Field(default_factory=list)


class InterviewOutput(ContractModel):
    positions: List[PositionWithBullets] = Field(default_factory=list)
    is_complete: bool = False
    next_question: Optional[str] = None

    @field_validator("is_complete", mode="before")
    @classmethod
    def _default_complete(cls, value: Any) -> Any:
        return False if value is None else value


class ChatMessage(ContractModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    role: MessageRole
    content: str
    timestamp: str  # ISO-8601

    @classmethod
    def create(cls, role: MessageRole, content: str, *, message_id: Optional[str] = None) -> "ChatMessage":
        return cls(
            id=message_id or uuid4().hex,
            role=role,
            content=content,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


class StepResponse(ContractModel):  # One turn of structured model output
    response: str
    extracted_position: Optional[Position] = None
    extracted_bullets: List[Bullet] = Field(default_factory=list)
    should_continue: bool = True

    @field_validator("extracted_bullets", mode="before")
    @classmethod
    def _empty_bullets(cls, value: Any) -> Any:
        return _list_or_empty(value)

    @field_validator("should_continue", mode="before")
    @classmethod
    def _default_continue(cls, value: Any) -> Any:
        return True if value is None else value


class InterviewState(ContractModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    current_position_index: int = Field(default=0, ge=0)
    extracted_data: Optional[InterviewOutput] = None
    status: SessionStatus = "in_progress"
    pending_bullets: List[Bullet] = Field(default_factory=list)

    @model_validator(mode="after")
    def _index_in_bounds(self) -> "InterviewState":
        count = len(self.extracted_data.positions) if self.extracted_data else 0
        if count == 0 and self.current_position_index != 0:
            raise ValueError("currentPositionIndex must be 0 when no positions are extracted")
        if count and self.current_position_index >= count:
            raise ValueError(
                f"currentPositionIndex {self.current_position_index} out of range for {count} positions"
            )
        return self

    @property
    def positions(self) -> List[PositionWithBullets]:
        return self.extracted_data.positions if self.extracted_data else []


def position_key(company: str, title: str) -> tuple[str, str]:
    """Fold case and runs of whitespace so spelling variants of one role compare equal."""
    return (_fold(company), _fold(title))


def _fold(text: str) -> str:
    return " ".join(text.split()).casefold()


__all__ = [
    "BULLET_MIN_LENGTH",
    "Bullet",
    "ChatMessage",
    "ContractModel",
    "InterviewOutput",
    "InterviewState",
    "MessageRole",
    "Metrics",
    "Position",
    "PositionWithBullets",
    "SessionStatus",
    "StepResponse",
    "position_key",
]
