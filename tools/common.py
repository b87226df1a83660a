from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from datetime import date
from typing import Tuple

from nongli.core.config import NongliConfig, config_from_env
from nongli.core.timeutil import to_solar_date


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--tz", default=None, help="zone for solar term dates (default: NONGLI_TZ or Asia/Shanghai)")
    parser.add_argument(
        "--year-policy",
        choices=("clamp", "raise"),
        default=None,
        help="years outside 1900..2100 (default: NONGLI_YEAR_POLICY or clamp)",
    )
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def config_from_args(args: argparse.Namespace) -> NongliConfig:
    """NONGLI_* environment first, then --tz / --year-policy on top."""
    config = config_from_env()
    if args.tz:
        config = replace(config, solarterm=replace(config.solarterm, tz=args.tz))
    if args.year_policy:
        config = replace(config, lunisolar=replace(config.lunisolar, out_of_range_policy=args.year_policy))
    return config


def resolve_date_range(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
) -> Tuple[date, date]:
    """
    --start/--end (inclusive) or a single --date. Reports usage errors through parser.
    """
    try:
        if args.start and args.end:
            start, end = to_solar_date(args.start, "start"), to_solar_date(args.end, "end")
        elif args.date:
            start = end = to_solar_date(args.date)
        else:
            parser.error("--date or --start/--end required")
    except ValueError as e:
        parser.error(str(e))

    if end < start:
        parser.error("--end must be >= --start")
    return start, end


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
