# src/nongli/core/solarterms.py
from __future__ import annotations

import math
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from functools import lru_cache
from typing import List, Optional, Tuple

from .config import SolarTermConfig
from .timeutil import SolarDateLike, require_utc, resolve_tz, to_solar_date

SOLAR_TERM_COUNT = 24

# Minutes from the anchor instant (config.base_utc) to term n of the anchor year.
# n = 0 is 小寒; the list follows the order of features.config.SOLAR_TERM_NAMES.
SOLAR_TERM_OFFSET_MINUTES: Tuple[int, ...] = (
    0, 21208, 42467, 63836, 85337, 107014, 128867, 150921, 173149, 195551, 218072,
    240693, 263343, 285989, 308563, 331033, 353350, 375494, 397447, 419210, 440795,
    462224, 483532, 504758,
)


def _check_term_index(n: int) -> int:
    i = int(n)
    if not (0 <= i < SOLAR_TERM_COUNT):
        raise ValueError(f"solar term index out of range: {n} (expected 0..23)")
    return i


def _round_half_away(x: float) -> int:
    """Round to nearest integer, ties away from zero."""
    r = int(math.floor(abs(x) + 0.5))
    return r if x >= 0 else -r


def solar_term_instant_utc(
    year: int,
    n: int,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> datetime:
    """
    UTC instant of term n (0..23) in the given solar year.

    base_utc + round((year - base_year) * tropical_year_ms) + offset[n] minutes
    """
    i = _check_term_index(n)
    base = require_utc(config.base_utc, "base_utc")
    years = int(year) - base.year
    ms = _round_half_away(years * config.tropical_year_ms) + SOLAR_TERM_OFFSET_MINUTES[i] * 60000
    return base + timedelta(milliseconds=ms)


def solar_term_date(
    year: int,
    n: int,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> date:
    """Civil date (in config.tz) on which term n of the year falls."""
    t_utc = solar_term_instant_utc(year, n, config=config)
    return t_utc.astimezone(resolve_tz(config.tz)).date()


@lru_cache(maxsize=64)
def _term_dates_for_year(year: int, config: SolarTermConfig) -> Tuple[Tuple[int, date], ...]:
    return tuple((n, solar_term_date(year, n, config=config)) for n in range(SOLAR_TERM_COUNT))


def solar_term_dates_for_year(
    year: int,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> List[Tuple[int, date]]:
    """All 24 (n, date) pairs of the year, in term order."""
    return list(_term_dates_for_year(int(year), config))


def solar_term_index_for_date(
    d: SolarDateLike,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> Optional[int]:
    """
    Term index whose date in d's year is exactly d, or None.
    """
    target = to_solar_date(d)
    for n, term_day in _term_dates_for_year(target.year, config):
        if term_day == target:
            return n
    return None


def solar_terms_between(
    start: SolarDateLike,
    end: SolarDateLike,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> List[Tuple[int, datetime]]:
    """
    (n, instant_utc) for every term whose civil date lies in [start, end] (inclusive).
    Sorted by instant.
    """
    s = to_solar_date(start, "start")
    e = to_solar_date(end, "end")
    if e < s:
        raise ValueError("end must be >= start")

    out: List[Tuple[int, datetime]] = []
    # a term near New Year can fall in the neighbouring civil year
    for y in range(max(s.year - 1, MINYEAR), min(e.year + 1, MAXYEAR) + 1):
        for n, term_day in _term_dates_for_year(y, config):
            if s <= term_day <= e:
                out.append((n, solar_term_instant_utc(y, n, config=config)))

    out.sort(key=lambda x: x[1])
    return out
