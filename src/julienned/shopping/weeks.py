"""Week boundary helpers for weekly shopping lists."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Tuple

_WEEKDAY_OFFSET = {"monday": 0, "sunday": 6}


def week_start_for(day: date, week_starts_on: str = "monday") -> date:
    """Return the first day of the week containing ``day``."""
    first = _WEEKDAY_OFFSET.get(week_starts_on.lower())
    if first is None:
        raise ValueError(f"Unsupported week start day: {week_starts_on}")
    return day - timedelta(days=(day.weekday() - first) % 7)


def week_bounds(day: date, week_starts_on: str = "monday") -> Tuple[date, date]:
    start = week_start_for(day, week_starts_on)
    return start, start + timedelta(days=6)
