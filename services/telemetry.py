"""Best-effort telemetry runs for hosted model calls.

A :class:`RunLogger` is created right before a call and reports either
:meth:`~RunLogger.success` or :meth:`~RunLogger.failure`. Storage errors are logged and
swallowed so they never replace the caller's result or error.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from storage import RunRecord, RunStore

logger = logging.getLogger(__name__)


def truncate_text(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]


class RunLogger:
    def __init__(
        self,
        store: Optional[RunStore],
        user_id: str,
        run_type: str,
        prompt_id: Optional[str] = None,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._run_type = run_type
        self._prompt_id = prompt_id
        self._started = time.perf_counter()

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)

    def success(
        self,
        *,
        model: Optional[str] = None,
        input: Any = None,
        output: Any = None,
        latency_ms: Optional[int] = None,
        tokens_in: Optional[int] = None,
        tokens_out: Optional[int] = None,
    ) -> Optional[RunRecord]:
        return self._write(
            model=model,
            input=input,
            output=output,
            success=True,
            latency_ms=latency_ms if latency_ms is not None else self.elapsed_ms(),
            tokens_in=tokens_in,
            tokens_out=tokens_out,
        )

    def failure(
        self,
        *,
        error: str,
        model: Optional[str] = None,
        input: Any = None,
        latency_ms: Optional[int] = None,
    ) -> Optional[RunRecord]:
        return self._write(
            model=model,
            input=input,
            output={"error": error},
            success=False,
            latency_ms=latency_ms if latency_ms is not None else self.elapsed_ms(),
        )

    def _write(self, **fields: Any) -> Optional[RunRecord]:
        if self._store is None:
            return None
        try:
            return self._store.insert_run(
                user_id=self._user_id,
                type=self._run_type,
                prompt_id=self._prompt_id,
                **fields,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Telemetry write failed type=%s user=%s: %s", self._run_type, self._user_id, exc)
            return None


__all__ = ["RunLogger", "truncate_text"]
