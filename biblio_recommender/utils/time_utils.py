"""
Date helpers for loan-window calculations.

Loan ledgers carry calendar dates (``YYYY-MM-DD``), so windows are computed
on ``date`` objects anchored to an explicit ``as_of`` day.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return utcnow().date()


def window_bounds(as_of: date, window_days: int) -> tuple[date, date]:
    """Return ``(start, end)`` for a trailing window of ``window_days`` ending at ``as_of``.

    Both bounds are inclusive: a loan dated exactly ``window_days`` before
    ``as_of`` is inside the window.

    Raises:
        ValueError: If ``window_days`` is not positive.
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be >= 1, got {window_days}.")
    return as_of - timedelta(days=window_days), as_of


def in_window(day: Optional[date], start: date, end: date) -> bool:
    """True if ``day`` is known and falls within ``[start, end]``."""
    return day is not None and start <= day <= end


def parse_date(value: object) -> Optional[date]:
    """Coerce a loosely-typed date value into a ``date``.

    Accepts ``date``/``datetime`` objects and ISO 8601 strings. A full
    timestamp (optionally ``Z``-suffixed) is reduced to its date part; any
    other trailing text makes the value unparsable. Returns ``None`` for
    empty or unparsable input instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None
