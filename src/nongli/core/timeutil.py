# src/nongli/core/timeutil.py
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from zoneinfo import ZoneInfo

SolarDateLike = Union[date, datetime, str]


def to_solar_date(x: SolarDateLike, name: str = "date") -> date:
    """
    Normalize a solar (Gregorian) date input to a plain date.

    - datetime: time-of-day is dropped (aware values keep their own civil date)
    - date: returned as is
    - str: ISO "YYYY-MM-DD"

    Raises
    ------
    ValueError
        If a string is not an ISO date.
    TypeError
        For any other input type.
    """
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        try:
            return date.fromisoformat(x.strip())
        except ValueError as e:
            raise ValueError(f"{name} must be YYYY-MM-DD (got {x!r})") from e
    raise TypeError(f"{name} must be date, datetime or str (got {type(x).__name__})")


def require_utc(dt: datetime, name: str = "dt") -> datetime:
    """
    Ensure a datetime is timezone-aware and UTC.

    Raises
    ------
    ValueError
        If dt is naive or not UTC.
    """
    if dt.tzinfo is None:
        raise ValueError(f"{name} must be timezone-aware UTC datetime (got naive datetime)")
    off = dt.utcoffset()
    if off is None:
        raise ValueError(f"{name} has invalid tzinfo (utcoffset is None): {dt.tzinfo!r}")
    if off != timedelta(0):
        raise ValueError(f"{name} must be UTC (utcoffset=0). Got: {dt.tzinfo!r}")
    return dt


def resolve_tz(name: Optional[str]) -> Optional[tzinfo]:
    """
    ZoneInfo for name; None means "host local zone" (datetime.astimezone() default).
    """
    if name is None:
        return None
    return ZoneInfo(name)


def iter_dates(start: date, end: date, *, inclusive: bool = False):
    """Yield start, start+1, ... while < end (<= end when inclusive)."""
    cur = start
    while cur < end or (inclusive and cur == end):
        yield cur
        if cur == date.max:
            break
        cur = cur + timedelta(days=1)
