"""Time-of-day and calendar helpers shared by the scheduling services."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import List, Tuple

import pandas as pd


_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class FormatError(ValueError):
    """Raised when a time-of-day string cannot be parsed."""


def time_to_minutes(time_str: str) -> int:
    """
    Convert an ``HH:MM`` or ``HH:MM:SS`` string to minutes since midnight.

    Seconds are accepted but ignored.

    Raises:
        FormatError: If the string is not a valid time of day
    """
    match = _TIME_RE.match(str(time_str).strip()) if time_str is not None else None
    if match is None:
        raise FormatError(f"Invalid time of day: {time_str!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise FormatError(f"Invalid time of day: {time_str!r}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as zero-padded ``HH:MM``."""
    if minutes < 0:
        raise FormatError(f"Negative minute offset: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes_to_time(time_str: str, minutes: int) -> str:
    return minutes_to_time(time_to_minutes(time_str) + minutes)


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """
    Check whether interval A intersects interval B.

    Back-to-back intervals (``end_a == start_b``) do not overlap; containment
    in either direction does.
    """
    return (
        (start_a >= start_b and start_a < end_b)
        or (end_a > start_b and end_a <= end_b)
        or (start_a <= start_b and end_a >= end_b)
    )


def to_date(value) -> date:
    """Coerce a date, datetime, Timestamp or ISO string to a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def week_range(day) -> Tuple[date, date]:
    """Monday..Sunday week containing ``day``."""
    day = to_date(day)
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_range(day) -> Tuple[date, date]:
    day = to_date(day)
    start = day.replace(day=1)
    end = (pd.Timestamp(start) + pd.offsets.MonthEnd(0)).date()
    return start, end


def is_weekday(day) -> bool:
    return to_date(day).weekday() < 5


def iso_week_id(day) -> str:
    """ISO week label, e.g. ``2025-W36``."""
    year, week, _ = to_date(day).isocalendar()
    return f"{year}-W{week:02d}"


def service_end_minutes(service) -> int:
    return time_to_minutes(service.start_time) + int(service.duration_minutes)


def format_time_label(time_str: str) -> str:
    """Render ``13:30`` as ``1:30 PM``."""
    minutes = time_to_minutes(time_str)
    hours, mins = divmod(minutes, 60)
    suffix = "AM" if hours < 12 else "PM"
    return f"{(hours % 12) or 12}:{mins:02d} {suffix}"


def time_options(start_hour: int = 7, end_hour: int = 18) -> List[str]:
    """Half-hour start times from ``start_hour`` up to (not including) ``end_hour``."""
    times = []
    for hour in range(start_hour, end_hour):
        times.append(f"{hour:02d}:00")
        times.append(f"{hour:02d}:30")
    return times
