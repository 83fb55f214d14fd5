"""Validate raw model text against the interview contract.

Every entry point is pure: it turns text (or already-decoded JSON) into a
:class:`Validated` result holding either the model instance or a typed
:class:`~contracts.errors.ContractError`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ContractError, MalformedResponse, SchemaViolation
from .interview import InterviewOutput, InterviewState, StepResponse

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Validated(Generic[T]):
    value: Optional[T] = None
    error: Optional[ContractError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.value


def validate_payload(data: Any, schema: Type[T]) -> Validated[T]:  # Validate decoded JSON
    if not isinstance(data, dict):
        return Validated(error=SchemaViolation("$", f"expected a JSON object, got {type(data).__name__}"))
    try:
        return Validated(value=schema.model_validate(data))
    except ValidationError as exc:
        return Validated(error=SchemaViolation.from_validation_error(exc))


def validate_text(text: str, schema: Type[T]) -> Validated[T]:  # Parse then validate
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        return Validated(error=MalformedResponse(str(exc), raw=text if isinstance(text, str) else ""))
    return validate_payload(data, schema)


def validate_step_response(text: str) -> Validated[StepResponse]:
    return validate_text(text, StepResponse)


def validate_interview_output(text: str) -> Validated[InterviewOutput]:
    return validate_text(text, InterviewOutput)


def validate_interview_state(text: str) -> Validated[InterviewState]:
    return validate_text(text, InterviewState)


def parse_step_response(text: str) -> StepResponse:
    """Raising variant of :func:`validate_step_response`."""
    return validate_step_response(text).unwrap()


def strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    if not isinstance(content, str):
        return content
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        while lines and lines[0].strip() == "":
            lines = lines[1:]
        while lines and lines[-1].strip() == "":
            lines = lines[:-1]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


__all__ = [
    "Validated",
    "parse_step_response",
    "strip_code_fences",
    "validate_interview_output",
    "validate_interview_state",
    "validate_payload",
    "validate_step_response",
    "validate_text",
]
