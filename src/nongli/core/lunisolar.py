# src/nongli/core/lunisolar.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Tuple

from .config import TABLE_FIRST_YEAR, TABLE_LAST_YEAR, LuniSolarConfig
from .timeutil import SolarDateLike, iter_dates, to_solar_date
from .yeartable import leap_month, leap_month_days, month_days, year_days

log = logging.getLogger(__name__)

# Gregorian date of lunar New Year's Day, lunar year 1900.
EPOCH = date(1900, 1, 31)


# ============================================================
# Public types
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    """
    农历 year / month / day / leap flag.

    month is always 1..12; a leap month is signalled only by is_leap.
    """
    year: int
    month: int
    day: int
    is_leap: bool = False

    @property
    def label(self) -> str:
        prefix = "L" if self.is_leap else ""
        return f"{self.year:04d}-{prefix}{self.month:02d}-{self.day:02d}"


# returned for dates before EPOCH
PRE_EPOCH_SENTINEL = LunarDate(year=TABLE_FIRST_YEAR, month=1, day=1, is_leap=False)


# ============================================================
# Month walk helpers
# ============================================================

def _months_in_order(year: int, *, config: LuniSolarConfig) -> List[Tuple[int, bool, int]]:
    """
    (month, is_leap, days) for every month of the lunar year in walk order.

    The leap month is walked immediately before its regular month.
    """
    leap = leap_month(year, config=config)
    out: List[Tuple[int, bool, int]] = []
    for m in range(1, 13):
        if leap == m:
            out.append((m, True, leap_month_days(year, config=config)))
        out.append((m, False, month_days(year, m, config=config)))
    return out


def _month_length(year: int, month: int, is_leap: bool, *, config: LuniSolarConfig) -> int:
    if is_leap:
        return leap_month_days(year, config=config)
    return month_days(year, month, config=config)


def _next_month(year: int, month: int, is_leap: bool, *, config: LuniSolarConfig) -> Tuple[int, int, bool]:
    """The (year, month, is_leap) that follows the given month in walk order."""
    if is_leap:
        return year, month, False
    if month < 12:
        nxt = month + 1
        return year, nxt, leap_month(year, config=config) == nxt
    ny = year + 1
    return ny, 1, leap_month(ny, config=config) == 1


# ============================================================
# Solar -> Lunar
# ============================================================

def solar_to_lunar(
    d: SolarDateLike,
    *,
    config: LuniSolarConfig = LuniSolarConfig(),
) -> LunarDate:
    """
    公历 → 农历.

    Counts whole days from EPOCH, then consumes lunar years and months until
    the residual falls inside one month.

    - Dates before EPOCH return the 1900-01-01 sentinel.
    - The year walk stops after TABLE_LAST_YEAR; dates past the table
      come back as (TABLE_LAST_YEAR + 1)-01-01.
    """
    target = to_solar_date(d)
    offset = (target - EPOCH).days

    if offset < 0:
        log.debug("date %s precedes epoch %s; returning sentinel", target, EPOCH)
        return PRE_EPOCH_SENTINEL

    year = TABLE_FIRST_YEAR
    while year <= TABLE_LAST_YEAR:
        total = year_days(year, config=config)
        if offset < total:
            for month, is_leap, days in _months_in_order(year, config=config):
                if offset < days:
                    return LunarDate(year=year, month=month, day=offset + 1, is_leap=is_leap)
                offset -= days
        offset -= total
        year += 1

    log.debug("date %s is past lunar year %d; walk capped", target, TABLE_LAST_YEAR)
    return LunarDate(year=year, month=1, day=1, is_leap=False)


def lunar_dates_between(
    start: SolarDateLike,
    end: SolarDateLike,
    *,
    inclusive: bool = False,
    config: LuniSolarConfig = LuniSolarConfig(),
) -> Iterator[Tuple[date, LunarDate]]:
    """
    批量转换: every day in [start, end), or [start, end] when inclusive.

    The first in-range day is resolved with a full walk; later days step
    forward one lunar day at a time.
    """
    s = to_solar_date(start, "start")
    e = to_solar_date(end, "end")

    cur = None
    for d in iter_dates(s, e, inclusive=inclusive):
        if cur is None or d <= EPOCH or cur.year > TABLE_LAST_YEAR:
            cur = solar_to_lunar(d, config=config)
        else:
            length = _month_length(cur.year, cur.month, cur.is_leap, config=config)
            if cur.day < length:
                cur = LunarDate(year=cur.year, month=cur.month, day=cur.day + 1, is_leap=cur.is_leap)
            else:
                y, m, leap = _next_month(cur.year, cur.month, cur.is_leap, config=config)
                if y > TABLE_LAST_YEAR:
                    cur = solar_to_lunar(d, config=config)
                else:
                    cur = LunarDate(year=y, month=m, day=1, is_leap=leap)
        yield d, cur


# ============================================================
# Lunar -> Solar
# ============================================================

def lunar_to_solar(
    year: int,
    month: int,
    day: int,
    is_leap: bool = False,
    *,
    config: LuniSolarConfig = LuniSolarConfig(),
) -> date:
    """
    农历 → 公历, using the same month order as solar_to_lunar.

    Raises
    ------
    ValueError
        If the lunar date does not exist in the table.
    """
    y, m, dd = int(year), int(month), int(day)
    if not (TABLE_FIRST_YEAR <= y <= TABLE_LAST_YEAR):
        raise ValueError(f"lunar year out of table range: {y} (supported {TABLE_FIRST_YEAR}..{TABLE_LAST_YEAR})")
    if not (1 <= m <= 12):
        raise ValueError(f"lunar month out of range: {m}")
    if is_leap and leap_month(y, config=config) != m:
        raise ValueError(f"lunar year {y} has no leap month {m}")

    length = _month_length(y, m, bool(is_leap), config=config)
    if not (1 <= dd <= length):
        raise ValueError(f"lunar day out of range: {dd} (month has {length} days)")

    offset = sum(year_days(yy, config=config) for yy in range(TABLE_FIRST_YEAR, y))
    for mm, leap, days in _months_in_order(y, config=config):
        if mm == m and leap == bool(is_leap):
            break
        offset += days

    return EPOCH + timedelta(days=offset + dd - 1)
