"""Latency timing for calls to hosted models."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class Span:
    def __init__(self, name: str) -> None:
        self.name = name
        self.ms = 0


@contextmanager
def span(name: str) -> Iterator[Span]:
    record = Span(name)
    start = time.perf_counter()
    try:
        yield record
    finally:
        record.ms = int((time.perf_counter() - start) * 1000)


__all__ = ["Span", "span"]
