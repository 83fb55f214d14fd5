"""Date conversion between the interview format and the storage format.

The interview model emits dates as ``YYYY-MM``; the database stores ``YYYY-MM-DD``.
"""
from __future__ import annotations

import re
from typing import Optional

_FULL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")


def to_postgres_date(value: Optional[str]) -> Optional[str]:
    """Return ``value`` as a ``YYYY-MM-DD`` date string.

    ``YYYY-MM`` gains a ``-01`` day, complete dates pass through, and anything else
    non-empty is returned unchanged for the storage layer to accept or reject.
    Empty and missing values map to ``None``.
    """

    if not value:
        return None
    if _FULL_DATE.match(value):
        return value
    if _YEAR_MONTH.match(value):
        return f"{value}-01"
    return value


__all__ = ["to_postgres_date"]
