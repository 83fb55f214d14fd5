"""Embedding conversion and comparison for vector-similarity columns."""
from __future__ import annotations

import math
from typing import List, Sequence


def to_pg_vector(embedding: Sequence[float]) -> str:
    """Render ``embedding`` in the bracketed text form, e.g. ``[0.1,0.2,0.3]``."""

    return "[" + ",".join(str(value) for value in embedding) + "]"


def from_pg_vector(text: str) -> List[float]:
    """Parse the bracketed text form back into floats; ``"[]"`` gives an empty list."""

    body = text.strip()
    if not (body.startswith("[") and body.endswith("]")):
        raise ValueError(f"not a vector literal: {text[:40]!r}")
    body = body[1:-1].strip()
    return [float(part) for part in body.split(",")] if body else []


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``; 0.0 when either is all zeros."""

    if len(a) != len(b):
        raise ValueError(f"dimension mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


__all__ = ["cosine_similarity", "from_pg_vector", "to_pg_vector"]
