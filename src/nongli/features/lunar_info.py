from __future__ import annotations

"""
Display-level composition of the lunar calendar features.

Precedence for the single display string (full_lunar_info):
  solar term name > traditional festival name > lunar date string
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional

from nongli.core.config import NongliConfig
from nongli.core.lunisolar import LunarDate, solar_to_lunar
from nongli.core.timeutil import SolarDateLike, to_solar_date
from nongli.features.config import (
    lunar_day_name,
    lunar_month_display_name,
    year_stem_branch,
    zodiac_animal,
)
from nongli.features.festivals import festival_from_lunar_date
from nongli.features.solar_terms import solar_term_for_date


@dataclass(frozen=True)
class LunarInfo:
    """
    Aggregate for display composition.

    solar_term / festival are None when the date is not a term date / not a festival.
    """
    lunar_date: str
    solar_term: Optional[str] = None
    festival: Optional[str] = None

    @property
    def display(self) -> str:
        return self.solar_term or self.festival or self.lunar_date

    def as_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def format_lunar_date(ld: LunarDate) -> str:
    """e.g. 八月十五, 闰二月初二"""
    return f"{lunar_month_display_name(ld.month, ld.is_leap)}{lunar_day_name(ld.day)}"


def lunar_date_string(d: SolarDateLike, *, config: NongliConfig = NongliConfig()) -> str:
    return format_lunar_date(solar_to_lunar(d, config=config.lunisolar))


def year_label(d: SolarDateLike, *, config: NongliConfig = NongliConfig()) -> str:
    """
    e.g. 甲辰年 龙, taken from the lunar year containing d.
    """
    ld = solar_to_lunar(d, config=config.lunisolar)
    return f"{year_stem_branch(ld.year)}年 {zodiac_animal(ld.year)}"


def lunar_info(d: SolarDateLike, *, config: NongliConfig = NongliConfig()) -> LunarInfo:
    target = to_solar_date(d)
    ld = solar_to_lunar(target, config=config.lunisolar)
    return LunarInfo(
        lunar_date=format_lunar_date(ld),
        solar_term=solar_term_for_date(target, config=config.solarterm),
        festival=festival_from_lunar_date(ld),
    )


def full_lunar_info(d: SolarDateLike, *, config: NongliConfig = NongliConfig()) -> str:
    """
    One display string: solar term name, else festival name, else lunar date string.
    """
    return lunar_info(d, config=config).display
