"""Date helpers shared by the date-based rules (yyyy-MM-dd only)."""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

_ISO_DATE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def parse_iso_date(text: str) -> date:
    """
    Parse a strict ``yyyy-MM-dd`` date.

    Raises ValueError for anything else, including well-formed text naming a
    day that does not exist (2023-02-30).
    """
    match = _ISO_DATE.fullmatch(text)
    if match is None:
        raise ValueError(f"not a yyyy-MM-dd date: {text!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def transaction_date_text(timestamp: str) -> str:
    """Date portion of a timestamp: the text before the first "T"."""
    return timestamp.partition("T")[0]


def days_between(start: str, end: str) -> Optional[int]:
    """Whole days from `start` to `end`, or None if either does not parse."""
    try:
        return (parse_iso_date(end) - parse_iso_date(start)).days
    except ValueError:
        return None


__all__ = ["days_between", "parse_iso_date", "transaction_date_text"]
