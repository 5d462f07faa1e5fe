"""
Calendar helpers shared by the engine.

Every engine entry point takes ``now`` explicitly. Naive datetimes are read
as UTC so comparisons between stored and supplied timestamps never mix
aware and naive values.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

SECONDS_PER_DAY = 86_400


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Floor of elapsed days, e.g. 47 hours -> 1."""
    elapsed = (ensure_aware(later) - ensure_aware(earlier)).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY)


def days_until(target: datetime, now: datetime) -> int:
    """Ceiling of remaining days; negative when the target is in the past."""
    remaining = (ensure_aware(target) - ensure_aware(now)).total_seconds()
    return math.ceil(remaining / SECONDS_PER_DAY)


def epoch_ms(value: datetime) -> int:
    return int(ensure_aware(value).timestamp() * 1000)


def sunday_weekday(value: datetime) -> int:
    """Weekday numbered 0-6 starting at Sunday."""
    return (value.weekday() + 1) % 7


def parse_hhmm(value: str) -> tuple[int, int]:
    """
    Parse an ``HH:MM`` clock string.

    Raises:
        ValueError: If the string is not a valid 24-hour time.
    """
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return hours, minutes


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return math.floor(value + 0.5)
