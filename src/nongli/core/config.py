# src/nongli/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

YearPolicy = Literal["clamp", "raise"]

# Lunar years covered by the packed year table (nongli.core.yeartable.LUNAR_INFO).
TABLE_FIRST_YEAR = 1900
TABLE_LAST_YEAR = 2100

NONGLI_TZ_ENV = "NONGLI_TZ"
NONGLI_YEAR_POLICY_ENV = "NONGLI_YEAR_POLICY"


@dataclass(frozen=True)
class LuniSolarConfig:
    """
    Year-table configuration.

    The packed table covers lunar years TABLE_FIRST_YEAR..TABLE_LAST_YEAR.
    Years outside it either fall back to the first entry ("clamp")
    or raise ValueError ("raise").
    """
    out_of_range_policy: YearPolicy = "clamp"

    def __post_init__(self) -> None:
        if self.out_of_range_policy not in ("clamp", "raise"):
            raise ValueError(f"out_of_range_policy must be 'clamp' or 'raise' (got {self.out_of_range_policy!r})")


@dataclass(frozen=True)
class SolarTermConfig:
    """
    Solar term (节气) configuration.

    Term instants are base_utc + (year - 1900) mean tropical years + a fixed
    per-term minute offset. tz is the civil zone used to read off the date;
    None means the host's local zone.
    """
    base_utc: datetime = datetime(1900, 1, 6, 2, 5, tzinfo=timezone.utc)
    tropical_year_ms: float = 31556925974.7
    tz: Optional[str] = "Asia/Shanghai"


@dataclass(frozen=True)
class NongliConfig:
    lunisolar: LuniSolarConfig = field(default_factory=LuniSolarConfig)
    solarterm: SolarTermConfig = field(default_factory=SolarTermConfig)


def config_from_env() -> NongliConfig:
    """
    Build a NongliConfig, overriding defaults from NONGLI_TZ / NONGLI_YEAR_POLICY.
    """
    tz = os.environ.get(NONGLI_TZ_ENV, "").strip()
    policy = os.environ.get(NONGLI_YEAR_POLICY_ENV, "").strip().lower()

    if policy and policy not in ("clamp", "raise"):
        raise ValueError(f"{NONGLI_YEAR_POLICY_ENV} must be 'clamp' or 'raise' (got {policy!r})")

    lunisolar = LuniSolarConfig(out_of_range_policy=policy) if policy else LuniSolarConfig()
    solarterm = SolarTermConfig(tz=tz) if tz else SolarTermConfig()
    return NongliConfig(lunisolar=lunisolar, solarterm=solarterm)
