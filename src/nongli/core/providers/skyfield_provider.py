from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from skyfield import almanac
from skyfield.api import Loader
from skyfield.framelib import ecliptic_frame

log = logging.getLogger(__name__)

# Apparent solar longitude of term n is FIRST_TERM_DEG + 15 * n (n = 0 is 小寒).
FIRST_TERM_DEG = 285.0
TERM_STEP_DEG = 15.0


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def _default_ephemeris_path() -> Path:
    """
    Prefer de440s (longer coverage) if present; otherwise fall back to de421.
    """
    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    p421 = data_dir / "de421.bsp"
    return p440s if p440s.exists() else p421


def _resolve_ephemeris_path(
    *,
    ephemeris_path: Optional[Path],
    ephemeris: Optional[Union[str, Path]],
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path (Path) if provided
      2) ephemeris (str|Path): absolute path as is, otherwise under the data dir
      3) default: de440s if present else de421
    """
    if ephemeris_path is not None:
        return ephemeris_path

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris)
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    return _default_ephemeris_path()


def _as_utc(dt_utc: datetime) -> datetime:
    if dt_utc.tzinfo is None:
        raise ValueError("dt_utc must be timezone-aware")
    return dt_utc.astimezone(timezone.utc)


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    Ephemeris-backed solar longitude, used to cross-check the tabulated
    solar term instants.
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        resolved = _resolve_ephemeris_path(
            ephemeris_path=self.ephemeris_path,
            ephemeris=self.ephemeris,
        )
        object.__setattr__(self, "ephemeris_path", resolved)

        if not self.ephemeris_path.exists():
            data_dir = _project_data_dir()
            cand_str = "\n".join(f"  - {p}" for p in (data_dir / "de440s.bsp", data_dir / "de421.bsp"))
            raise FileNotFoundError(
                f"Ephemeris not found: {self.ephemeris_path}\n"
                f"Place one of the following files under {data_dir}:\n"
                f"{cand_str}\n"
                "Or pass ephemeris='de440s.bsp' / ephemeris_path=Path(...)."
            )

        loader = Loader(str(self.ephemeris_path.parent))
        eph = loader(self.ephemeris_path.name)
        ts = loader.timescale()

        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)
        object.__setattr__(self, "_earth", eph["earth"])
        object.__setattr__(self, "_sun", eph["sun"])

    def _sun_lon(self, t):
        obs = self._earth.at(t).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(ecliptic_frame)
        return lon.degrees % 360.0

    def sun_ecliptic_longitude_deg(self, dt_utc: datetime) -> float:
        """Apparent solar ecliptic longitude (true ecliptic of date), degrees."""
        t = self._ts.from_datetime(_as_utc(dt_utc))
        return float(self._sun_lon(t))

    def solar_term_instants_utc(self, start_utc: datetime, end_utc: datetime) -> List[Tuple[int, datetime]]:
        """
        (n, instant_utc) for every solar term crossing in [start_utc, end_utc).
        """
        s = _as_utc(start_utc)
        e = _as_utc(end_utc)
        if not (s < e):
            raise ValueError("start_utc must be < end_utc")

        def term_bin(t):
            return ((self._sun_lon(t) - FIRST_TERM_DEG) % 360.0 // TERM_STEP_DEG).astype(int)

        term_bin.step_days = 7

        times, bins = almanac.find_discrete(self._ts.from_datetime(s), self._ts.from_datetime(e), term_bin)

        out: List[Tuple[int, datetime]] = []
        for t, n in zip(times, bins):
            dt = t.utc_datetime()
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            out.append((int(n), dt))

        if not out:
            log.warning("no solar term crossings found: start_utc=%s end_utc=%s", s.isoformat(), e.isoformat())
        return out
