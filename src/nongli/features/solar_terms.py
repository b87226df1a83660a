from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional

from nongli.core.config import SolarTermConfig
from nongli.core.solarterms import solar_term_index_for_date, solar_terms_between
from nongli.core.timeutil import SolarDateLike, resolve_tz
from nongli.features.config import solar_term_info, solar_term_name


@dataclass(frozen=True)
class SolarTermEvent:
    """
    A single solar term (UTC instant + derived local info).
    """
    n: int          # 0..23
    name: str
    kind: str       # "节" or "中气"
    utc: datetime
    local: datetime
    local_date: date


def solar_term_for_date(
    d: SolarDateLike,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> Optional[str]:
    """
    Name of the solar term falling on d, or None if d is not a term date.
    """
    n = solar_term_index_for_date(d, config=config)
    if n is None:
        return None
    return solar_term_name(n)


def solar_term_events_between(
    start: SolarDateLike,
    end: SolarDateLike,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> List[Dict]:
    """
    Enumerate solar terms whose local date lies in [start, end] (inclusive).

    Returns:
      list[dict] with keys: n, name, kind, utc, local, local_date (YYYY-MM-DD)
    """
    tz = resolve_tz(config.tz)

    out: List[Dict] = []
    for n, t_utc in solar_terms_between(start, end, config=config):
        info = solar_term_info(n)
        t_local = t_utc.astimezone(tz)
        out.append(
            {
                "n": info.n,
                "name": info.name,
                "kind": info.kind,
                "utc": t_utc,
                "local": t_local,
                "local_date": t_local.date().isoformat(),
            }
        )
    return out


def solar_term_events_between_as_objects(
    start: SolarDateLike,
    end: SolarDateLike,
    *,
    config: SolarTermConfig = SolarTermConfig(),
) -> List[SolarTermEvent]:
    """
    Thin wrapper returning SolarTermEvent objects instead of dicts.
    """
    rows = solar_term_events_between(start, end, config=config)
    return [
        SolarTermEvent(
            n=int(r["n"]),
            name=r["name"],
            kind=r["kind"],
            utc=r["utc"],
            local=r["local"],
            local_date=date.fromisoformat(r["local_date"]),
        )
        for r in rows
    ]
