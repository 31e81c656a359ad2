"""
Roster timestamp helpers.

Duty markers come from the roster as "YYYY-MM-DD HH:MM" local times.
Clock times are handled as minutes since local midnight.
"""

from datetime import datetime
from typing import Optional

from core.parameters import MINUTES_PER_DAY


def parse_duty_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a duty marker; None when missing or unparseable"""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
    except ValueError:
        return None


def time_of_day(value: Optional[str]) -> Optional[str]:
    """Clock part of a duty marker ("2024-01-01 06:30" -> "06:30")"""
    parsed = parse_duty_timestamp(value)
    if parsed is None:
        return None
    return parsed.strftime('%H:%M')


def clock_to_minutes(clock: str) -> int:
    """
    "HH:MM" -> minutes since midnight.

    Raises ValueError for anything that is not a valid 24-hour clock time.
    """
    try:
        hour_str, minute_str = clock.strip().split(':')
        hour, minute = int(hour_str), int(minute_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid clock time: {clock!r}")

    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid clock time: {clock!r}")
    return hour * 60 + minute


def minutes_to_clock(minutes: int) -> str:
    """Minutes (any sign, any magnitude) -> "HH:MM" on a 24h clock"""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
