"""Errors raised when model output does not satisfy the interview contract."""
from __future__ import annotations

from typing import Any, Dict, Sequence, Tuple

from pydantic import ValidationError


class ContractError(ValueError):  # Base class for contract failures
    pass


class MalformedResponse(ContractError):
    """The text returned by the model is not valid JSON."""

    def __init__(self, detail: str, raw: str = "") -> None:
        super().__init__(f"Model response is not valid JSON: {detail}")
        self.detail = detail
        self.raw = raw


class SchemaViolation(ContractError):
    """The JSON is well formed but breaks the contract.

    ``field`` is the dotted path of the first offending field and ``constraint`` the
    rule it broke; ``errors`` keeps every reported problem.
    """

    def __init__(self, field: str, constraint: str, errors: Sequence[Dict[str, Any]] = ()) -> None:
        super().__init__(f"{field}: {constraint}")
        self.field = field
        self.constraint = constraint
        self.errors: Tuple[Dict[str, Any], ...] = tuple(errors)

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "SchemaViolation":
        problems = exc.errors(include_url=False, include_context=False, include_input=False)
        first = problems[0] if problems else {"loc": (), "msg": str(exc), "type": "invalid"}
        field = ".".join(str(part) for part in first.get("loc", ())) or "$"
        constraint = f"{first.get('msg', 'invalid')} ({first.get('type', 'invalid')})"
        return cls(field, constraint, problems)


__all__ = ["ContractError", "MalformedResponse", "SchemaViolation"]
