from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from nongli.core.config import TABLE_FIRST_YEAR, TABLE_LAST_YEAR, NongliConfig, config_from_env
from nongli.core.lunisolar import lunar_dates_between
from nongli.core.lunisolar import LunarDate as CoreLunarDate
from nongli.core.solarterms import solar_term_dates_for_year, solar_term_instant_utc
from nongli.core.timeutil import SolarDateLike, resolve_tz, to_solar_date
from nongli.features.config import solar_term_info, year_stem_branch, zodiac_animal
from nongli.features.festivals import festival_from_lunar_date
from nongli.features.lunar_info import LunarInfo, format_lunar_date
from nongli.features.solar_terms import solar_term_events_between

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("nongli.api.public")

DEFAULT_LIMIT_DAYS = 370


# ============================================================
# Response Models
# ============================================================
class LunarDate(BaseModel):
    year: int
    month: int
    day: int
    is_leap: bool = Field(default=False, description="true inside a leap month (闰月)")


class SolarTerm(BaseModel):
    n: int = Field(description="0..23, 小寒 = 0")
    name: str
    kind: str = Field(description="节 or 中气")
    utc: datetime
    local: datetime


class DayResponse(BaseModel):
    date: date
    tz: str
    lunar: LunarDate
    lunar_date: str = Field(description="e.g. 八月十五 / 闰二月初二")
    year_name: str = Field(description="stem-branch name of the lunar year")
    zodiac: str
    solar_term: Optional[SolarTerm] = None
    festival: Optional[str] = None
    display: str = Field(description="solar term > festival > lunar date")


class RangeResponse(BaseModel):
    start: date
    end: date
    tz: str
    days: List[DayResponse]


class YearSolarTermsResponse(BaseModel):
    year: int
    tz: str
    terms: List[SolarTerm]


# ============================================================
# Helpers: parsing & tz
# ============================================================
def _parse_iso_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {s} (expected YYYY-MM-DD)") from e


def _get_tzinfo(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Unknown timezone: {tz}") from e


def _config_for_tz(tz: Optional[str]) -> NongliConfig:
    base = config_from_env()
    if not tz:
        return base
    return replace(base, solarterm=replace(base.solarterm, tz=tz))


def _request_config(tz: Optional[str]) -> Tuple[NongliConfig, str]:
    """
    Config for one request: explicit tz, else NONGLI_TZ, else the built-in default.
    Returns the config and the zone name echoed in responses.
    """
    config = _config_for_tz(tz)
    tz_name = config.solarterm.tz
    if tz_name:
        _get_tzinfo(tz_name)
    return config, tz_name or "local"


def _check_supported(d: date, name: str = "date") -> date:
    if not (TABLE_FIRST_YEAR <= d.year <= TABLE_LAST_YEAR):
        raise HTTPException(
            status_code=422,
            detail=f"{name} out of supported range: {d} (years {TABLE_FIRST_YEAR}..{TABLE_LAST_YEAR})",
        )
    return d


def _check_range(start: date, end: date, limit_days: int) -> int:
    if end < start:
        raise HTTPException(status_code=422, detail="end must be >= start")
    days_count = (end - start).days + 1
    if days_count > limit_days:
        raise HTTPException(status_code=422, detail=f"range too large: {days_count} days (limit_days={limit_days})")
    return days_count


# ============================================================
# Core feature calcs
# ============================================================
def _terms_by_local_date(start: date, end: date, config: NongliConfig) -> Dict[date, SolarTerm]:
    out: Dict[date, SolarTerm] = {}
    for ev in solar_term_events_between(start, end, config=config.solarterm):
        d = date.fromisoformat(ev["local_date"])
        out.setdefault(
            d,
            SolarTerm(n=ev["n"], name=ev["name"], kind=ev["kind"], utc=ev["utc"], local=ev["local"]),
        )
    return out


def _day_response(
    d: date,
    ld: CoreLunarDate,
    term: Optional[SolarTerm],
    *,
    tz: str,
) -> DayResponse:
    info = LunarInfo(
        lunar_date=format_lunar_date(ld),
        solar_term=term.name if term is not None else None,
        festival=festival_from_lunar_date(ld),
    )
    return DayResponse(
        date=d,
        tz=tz,
        lunar=LunarDate(year=ld.year, month=ld.month, day=ld.day, is_leap=ld.is_leap),
        lunar_date=info.lunar_date,
        year_name=year_stem_branch(ld.year),
        zodiac=zodiac_animal(ld.year),
        solar_term=term,
        festival=info.festival,
        display=info.display,
    )


def _days_between(start: date, end: date, config: NongliConfig, tz: str) -> List[DayResponse]:
    terms = _terms_by_local_date(start, end, config)
    return [
        _day_response(d, ld, terms.get(d), tz=tz)
        for d, ld in lunar_dates_between(start, end, inclusive=True, config=config.lunisolar)
    ]


# =========================================================
# Public JSON API (function-style, HTTP-ready)
# =========================================================
def get_calendar_day(date_: SolarDateLike, *, tz: Optional[str] = None) -> dict:
    d = to_solar_date(date_)
    config = _config_for_tz(tz)
    tz_name = config.solarterm.tz or "local"
    return _days_between(d, d, config, tz_name)[0].model_dump(mode="json")


def get_calendar_range(
    start: SolarDateLike,
    end: SolarDateLike,
    *,
    tz: Optional[str] = None,
) -> dict:
    s = to_solar_date(start, "start")
    e = to_solar_date(end, "end")
    if e < s:
        raise ValueError("end must be >= start")

    config = _config_for_tz(tz)
    tz_name = config.solarterm.tz or "local"
    resp = RangeResponse(start=s, end=e, tz=tz_name, days=_days_between(s, e, config, tz_name))
    return resp.model_dump(mode="json")


# ============================================================
# Endpoints
# ============================================================
TZ_QUERY_DESCRIPTION = "IANA zone for solar term dates; defaults to NONGLI_TZ, then Asia/Shanghai"


@router.get("/day", response_model=DayResponse)
def get_day(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD"),
    tz: Optional[str] = Query(None, description=TZ_QUERY_DESCRIPTION),
    timing: bool = Query(False, description="log timings"),
) -> DayResponse:
    d = _check_supported(_parse_iso_date(date_str))
    config, tz_name = _request_config(tz)

    t0 = time.perf_counter()
    day = _days_between(d, d, config, tz_name)[0]
    t1 = time.perf_counter()

    if timing:
        log.warning("timing /day date=%s tz=%s total=%.3fs", d, tz_name, t1 - t0)

    return day


@router.get("/range", response_model=RangeResponse)
def get_range(
    start_str: str = Query(..., alias="start", description="YYYY-MM-DD"),
    end_str: str = Query(..., alias="end", description="YYYY-MM-DD"),
    tz: Optional[str] = Query(None, description=TZ_QUERY_DESCRIPTION),
    limit_days: int = Query(DEFAULT_LIMIT_DAYS, ge=1, le=2000, description="max days per request"),
    timing: bool = Query(False, description="log timings"),
) -> RangeResponse:
    start = _check_supported(_parse_iso_date(start_str), "start")
    end = _check_supported(_parse_iso_date(end_str), "end")
    days_count = _check_range(start, end, limit_days)
    config, tz_name = _request_config(tz)

    t0 = time.perf_counter()
    days = _days_between(start, end, config, tz_name)
    t1 = time.perf_counter()

    if timing:
        log.warning(
            "timing /range start=%s end=%s tz=%s days=%d total=%.3fs",
            start, end, tz_name, days_count, t1 - t0,
        )

    return RangeResponse(start=start, end=end, tz=tz_name, days=days)


@router.get("/solar-terms", response_model=YearSolarTermsResponse)
def get_solar_terms(
    year: int = Query(..., ge=TABLE_FIRST_YEAR, le=TABLE_LAST_YEAR),
    tz: Optional[str] = Query(None, description=TZ_QUERY_DESCRIPTION),
) -> YearSolarTermsResponse:
    config, tz_name = _request_config(tz)
    tzinfo = resolve_tz(config.solarterm.tz)

    terms: List[SolarTerm] = []
    for n, _d in solar_term_dates_for_year(year, config=config.solarterm):
        info = solar_term_info(n)
        t_utc = solar_term_instant_utc(year, n, config=config.solarterm)
        terms.append(SolarTerm(n=n, name=info.name, kind=info.kind, utc=t_utc, local=t_utc.astimezone(tzinfo)))

    return YearSolarTermsResponse(year=year, tz=tz_name, terms=terms)
