from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from nongli.core.config import LuniSolarConfig
from nongli.core.lunisolar import LunarDate, solar_to_lunar
from nongli.core.timeutil import SolarDateLike
from nongli.features.config import festival_from_lunar_month_day, festival_key


@dataclass(frozen=True)
class Festival:
    """
    A traditional festival match.

    - key: lunar "month-day" used for the lookup
    - name: festival name (春节/中秋节/...)
    """
    key: str
    name: str

    def __str__(self) -> str:
        return self.name


def festival_from_lunar_date(ld: LunarDate) -> Optional[str]:
    """
    LunarDate → festival name, or None.

    NOTE:
      - leap-month dates never match (闰八月十五 is not 中秋节)
    """
    return festival_from_lunar_month_day(ld.month, ld.day, ld.is_leap)


def festival_info_from_lunar_date(ld: LunarDate) -> Optional[Festival]:
    name = festival_from_lunar_date(ld)
    if name is None:
        return None
    return Festival(key=festival_key(ld.month, ld.day), name=name)


def festival_for_date(
    d: SolarDateLike,
    *,
    config: LuniSolarConfig = LuniSolarConfig(),
) -> Optional[str]:
    """
    Solar date → traditional festival name (via the lunar date), or None.
    """
    return festival_from_lunar_date(solar_to_lunar(d, config=config))
