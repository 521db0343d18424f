"""
Time and date utilities for report periods and stored timestamps.

Key concepts:
  - Day boundaries: report periods are normalized to 00:00:00 / 23:59:59 UTC.
  - Stored timestamps: every timestamp column is written by
    ``to_db_timestamp()`` in one fixed-width format, so SQL range filters
    can compare the strings directly.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

DB_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def start_of_day(day: date | datetime) -> datetime:
    """Return 00:00:00 UTC of ``day``."""
    if isinstance(day, datetime):
        day = as_utc(day).date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date | datetime) -> datetime:
    """Return 23:59:59 UTC of ``day`` (second precision, matching stored timestamps)."""
    if isinstance(day, datetime):
        day = as_utc(day).date()
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def date_range(start: date, end: date, step_days: int = 1) -> list[date]:
    """Generate a list of dates from ``start`` to ``end`` (inclusive).

    Args:
        start: First date in the range.
        end: Last date in the range (inclusive).
        step_days: Step size in days (default 1).

    Returns:
        List of date objects.

    Raises:
        ValueError: If ``end < start`` or ``step_days < 1``.
    """
    if end < start:
        raise ValueError(f"end ({end}) must be >= start ({start}).")
    if step_days < 1:
        raise ValueError(f"step_days must be >= 1, got {step_days}.")

    result: list[date] = []
    current = start
    while current <= end:
        result.append(current)
        current += timedelta(days=step_days)
    return result


def to_db_timestamp(value: datetime) -> str:
    """Format a datetime for storage, e.g. ``"2025-01-07T09:30:00Z"``.

    Naive datetimes are taken to be UTC already.
    """
    return as_utc(value).strftime(DB_TIMESTAMP_FORMAT)


def parse_db_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
