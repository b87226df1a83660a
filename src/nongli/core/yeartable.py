# src/nongli/core/yeartable.py
from __future__ import annotations

import logging
from typing import List

from .config import TABLE_FIRST_YEAR, TABLE_LAST_YEAR, LuniSolarConfig

log = logging.getLogger(__name__)

# ============================================================
# Packed lunar year data (1900..2100), one entry per lunar year.
#
#   bits 0-3  : leap month number (0 = no leap month)
#   bits 4-15 : month 1..12 size, month m at bit (16 - m) (1 = 30 days, 0 = 29)
#   bit 16    : leap month size (1 = 30 days, 0 = 29)
# ============================================================
LUNAR_INFO: List[int] = [
    0x04bd8, 0x04ae0, 0x0a570, 0x054d5, 0x0d260, 0x0d950, 0x16554, 0x056a0, 0x09ad0, 0x055d2,
    0x04ae0, 0x0a5b6, 0x0a4d0, 0x0d250, 0x1d255, 0x0b540, 0x0d6a0, 0x0ada2, 0x095b0, 0x14977,
    0x04970, 0x0a4b0, 0x0b4b5, 0x06a50, 0x06d40, 0x1ab54, 0x02b60, 0x09570, 0x052f2, 0x04970,
    0x06566, 0x0d4a0, 0x0ea50, 0x06e95, 0x05ad0, 0x02b60, 0x186e3, 0x092e0, 0x1c8d7, 0x0c950,
    0x0d4a0, 0x1d8a6, 0x0b550, 0x056a0, 0x1a5b4, 0x025d0, 0x092d0, 0x0d2b2, 0x0a950, 0x0b557,
    0x06ca0, 0x0b550, 0x15355, 0x04da0, 0x0a5b0, 0x14573, 0x052b0, 0x0a9a8, 0x0e950, 0x06aa0,
    0x0aea6, 0x0ab50, 0x04b60, 0x0aae4, 0x0a570, 0x05260, 0x0f263, 0x0d950, 0x05b57, 0x056a0,
    0x096d0, 0x04dd5, 0x04ad0, 0x0a4d0, 0x0d4d4, 0x0d250, 0x0d558, 0x0b540, 0x0b6a0, 0x195a6,
    0x095b0, 0x049b0, 0x0a974, 0x0a4b0, 0x0b27a, 0x06a50, 0x06d40, 0x0af46, 0x0ab60, 0x09570,
    0x04af5, 0x04970, 0x064b0, 0x074a3, 0x0ea50, 0x06b58, 0x055c0, 0x0ab60, 0x096d5, 0x092e0,
    0x0c960, 0x0d954, 0x0d4a0, 0x0da50, 0x07552, 0x056a0, 0x0abb7, 0x025d0, 0x092d0, 0x0cab5,
    0x0a950, 0x0b4a0, 0x0baa4, 0x0ad50, 0x055d9, 0x04ba0, 0x0a5b0, 0x15176, 0x052b0, 0x0a930,
    0x07954, 0x06aa0, 0x0ad50, 0x05b52, 0x04b60, 0x0a6e6, 0x0a4e0, 0x0d260, 0x0ea65, 0x0d530,
    0x05aa0, 0x076a3, 0x096d0, 0x04bd7, 0x04ad0, 0x0a4d0, 0x1d0b6, 0x0d250, 0x0d520, 0x0dd45,
    0x0b5a0, 0x056d0, 0x055b2, 0x049b0, 0x0a577, 0x0a4b0, 0x0aa50, 0x1b255, 0x06d20, 0x0ada0,
    0x14b63, 0x09370, 0x049f8, 0x04970, 0x064b0, 0x168a6, 0x0ea50, 0x06b20, 0x1a6c4, 0x0aae0,
    0x0a2e0, 0x0d2e3, 0x0c960, 0x0d557, 0x0d4a0, 0x0da50, 0x05d55, 0x056a0, 0x0a6d0, 0x055d4,
    0x052d0, 0x0a9b8, 0x0a950, 0x0b4a0, 0x0b6a6, 0x0ad50, 0x055a0, 0x0aba4, 0x0a5b0, 0x052b0,
    0x0b273, 0x06930, 0x07337, 0x06aa0, 0x0ad50, 0x14b55, 0x04b60, 0x0a570, 0x054e4, 0x0d160,
    0x0e968, 0x0d520, 0x0daa0, 0x16aa6, 0x056d0, 0x04ae0, 0x0a9d4, 0x0a2d0, 0x0d150, 0x0f252,
    0x0d520,
]

BIG_MONTH_DAYS = 30
SMALL_MONTH_DAYS = 29

# month index used to address "the leap month of this year"
LEAP_MONTH_INDEX = 13


def year_info(year: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    """
    Packed entry for a lunar year.

    Out-of-range years fall back to the first (1900) entry under the default
    "clamp" policy, or raise ValueError under "raise".
    """
    y = int(year)
    if y < TABLE_FIRST_YEAR or y > TABLE_LAST_YEAR:
        if config.out_of_range_policy == "raise":
            raise ValueError(
                f"lunar year out of table range: {y} (supported {TABLE_FIRST_YEAR}..{TABLE_LAST_YEAR})"
            )
        log.debug("lunar year %d out of table range; using %d entry", y, TABLE_FIRST_YEAR)
        return LUNAR_INFO[0]
    return LUNAR_INFO[y - TABLE_FIRST_YEAR]


def leap_month(year: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    """Leap month number (1..12) of the year, or 0 if it has none."""
    return year_info(year, config=config) & 0xF


def is_big_month(year: int, month: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> bool:
    """
    True if the month has 30 days.

    month: 1..12 for regular months, 13 for the leap month.
    Any other month value (or 13 in a year without a leap month) is False.
    """
    info = year_info(year, config=config)
    m = int(month)
    if 1 <= m <= 12:
        return ((info >> (16 - m)) & 0x1) == 1
    if m == LEAP_MONTH_INDEX and (info & 0xF) > 0:
        return (info & 0x10000) != 0
    return False


def month_days(year: int, month: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    """Length (29/30) of regular month 1..12."""
    m = int(month)
    if not (1 <= m <= 12):
        raise ValueError(f"lunar month out of range: {month}")
    return BIG_MONTH_DAYS if is_big_month(year, m, config=config) else SMALL_MONTH_DAYS


def leap_month_days(year: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    """Length (29/30) of the leap month, or 0 if the year has none."""
    if leap_month(year, config=config) == 0:
        return 0
    return BIG_MONTH_DAYS if is_big_month(year, LEAP_MONTH_INDEX, config=config) else SMALL_MONTH_DAYS


def month_count(year: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    return 13 if leap_month(year, config=config) > 0 else 12


def year_days(year: int, *, config: LuniSolarConfig = LuniSolarConfig()) -> int:
    """Total days of the lunar year (12 regular months plus the leap month, if any)."""
    total = sum(month_days(year, m, config=config) for m in range(1, 13))
    return total + leap_month_days(year, config=config)
