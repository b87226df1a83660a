from __future__ import annotations

"""
Solar term (二十四节气) check script.

Uses:
- nongli.features.solar_terms.solar_term_events_between
- nongli.core.providers.skyfield_provider.SkyfieldProvider (--verify only)
"""

import argparse
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from nongli.core.timeutil import resolve_tz
from nongli.features.solar_terms import solar_term_events_between

from tools.common import add_common_args, config_from_args, resolve_date_range, dump_json, skip

ENV_EPHEMERIS_PATH = "NONGLI_EPHEMERIS_PATH"
EPHEMERIS_NAMES = ("de440s.bsp", "de421.bsp")


def _find_ephemeris(path_arg: str) -> Tuple[Optional[Path], str]:
    """
    (path, "") when a .bsp file is found, else (None, reason).
    Order: --ephemeris-path, NONGLI_EPHEMERIS_PATH, data/de440s.bsp, data/de421.bsp.
    """
    raw = (path_arg or "").strip() or os.environ.get(ENV_EPHEMERIS_PATH, "").strip()
    if raw:
        p = Path(raw).expanduser()
        return (p, "") if p.exists() else (None, f"ephemeris not found: {p}")

    for name in EPHEMERIS_NAMES:
        p = Path("data") / name
        if p.exists():
            return p, ""
    return None, f"no ephemeris: set {ENV_EPHEMERIS_PATH}, pass --ephemeris-path, or place data/{EPHEMERIS_NAMES[0]}"


def _ephemeris_instants(provider, rows: List[Dict]) -> Dict[int, datetime]:
    """row index -> ephemeris instant of the same term (within 3 days)."""
    if not rows:
        return {}
    t0 = min(r["utc"] for r in rows) - timedelta(days=3)
    t1 = max(r["utc"] for r in rows) + timedelta(days=3)
    out: Dict[int, datetime] = {}
    for n, t in provider.solar_term_instants_utc(t0, t1):
        for i, r in enumerate(rows):
            if r["n"] == n and abs((r["utc"] - t).total_seconds()) < 3 * 86400:
                out[i] = t
    return out


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Solar term (二十四节气) check")
    add_common_args(parser)
    parser.add_argument("--ephemeris-path", default="", help=".bsp file for --verify")
    parser.add_argument("--verify", action="store_true", help="compare against a JPL ephemeris (skyfield)")
    args = parser.parse_args(argv)

    start, end = resolve_date_range(parser, args)
    config = config_from_args(args).solarterm
    tz = resolve_tz(config.tz)
    rows = solar_term_events_between(start, end, config=config)

    if args.verify:
        eph_path, reason = _find_ephemeris(args.ephemeris_path)
        if eph_path is None:
            skip(reason)

        from nongli.core.providers.skyfield_provider import SkyfieldProvider

        provider = SkyfieldProvider(ephemeris_path=eph_path)
        ref = _ephemeris_instants(provider, rows)
        for i, r in enumerate(rows):
            t_ref = ref.get(i)
            r["ephemeris_local"] = t_ref.astimezone(tz) if t_ref is not None else None
            r["diff_minutes"] = (
                round((r["utc"] - t_ref).total_seconds() / 60.0, 1) if t_ref is not None else None
            )
            r["date_match"] = (
                t_ref is not None and t_ref.astimezone(tz).date().isoformat() == r["local_date"]
            )

    if args.json:
        payload = []
        for r in rows:
            item = {
                "n": r["n"],
                "name": r["name"],
                "kind": r["kind"],
                "at_local": r["local"].isoformat(),
                "date_local": r["local_date"],
            }
            if args.verify:
                ref_local = r["ephemeris_local"]
                item["ephemeris_local"] = ref_local.isoformat() if ref_local is not None else None
                item["diff_minutes"] = r["diff_minutes"]
                item["date_match"] = r["date_match"]
            payload.append(item)
        dump_json({"solar_terms": payload})
        return

    for r in rows:
        line = f"{r['local_date']}  {r['name']}  {r['kind']}  n={r['n']:02d}  at={r['local'].isoformat()}"
        if args.verify:
            mark = "ok" if r["date_match"] else "DATE MISMATCH"
            line += f"  diff={r['diff_minutes']}min  {mark}"
        print(line)


if __name__ == "__main__":
    main()
