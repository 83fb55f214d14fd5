"""Observability utilities for the interview service."""
from .logger import log_event
from .tracing import Span, span

__all__ = ["log_event", "Span", "span"]
