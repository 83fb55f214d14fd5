"""Parsing and joining of comma-separated skill lists."""
from __future__ import annotations

from typing import Iterable, List, Optional

SKILLS_DELIMITER = ", "


def parse_skills(text: str) -> List[str]:
    """Split ``text`` on commas, trimming whitespace and dropping empty entries."""

    return [item.strip() for item in text.split(",") if item.strip()]


def join_skills(skills: Optional[Iterable[str]]) -> str:
    """Join ``skills`` for display; ``None`` yields an empty string."""

    if skills is None:
        return ""
    return SKILLS_DELIMITER.join(skills)


__all__ = ["SKILLS_DELIMITER", "join_skills", "parse_skills"]
