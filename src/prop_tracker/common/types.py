"""Shared type aliases and small parsing helpers."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Callable, TypeAlias

# Monotonic clock returning seconds
Clock: TypeAlias = Callable[[], float]

_ISO_DURATION_RE = re.compile(r"PT(\d+)M([\d.]+)S")


def format_iso_duration(value: object, empty: str = "") -> str:
    """Convert an ISO-8601 clock duration ("PT05M42.00S") to "5:42".

    Seconds are floored. Empty or non-string input returns ``empty``; any other
    string that does not look like a duration is passed through unchanged.
    """
    if not value or not isinstance(value, str):
        return empty
    match = _ISO_DURATION_RE.search(value)
    if not match:
        return value
    minutes = int(match.group(1))
    seconds = int(float(match.group(2)))
    return f"{minutes}:{seconds:02d}"


def parse_date(value: str | date) -> date:
    """Parse a calendar date from "YYYY-MM-DD" or an ISO timestamp."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def parse_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
