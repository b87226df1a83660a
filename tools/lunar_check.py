from __future__ import annotations

"""
Lunar date check script.

Uses:
- nongli.core.lunisolar.lunar_dates_between
- nongli.features.lunar_info (display precedence)
"""

import argparse
from typing import List, Optional

from nongli.core.lunisolar import lunar_dates_between
from nongli.features.config import year_stem_branch, zodiac_animal
from nongli.features.lunar_info import format_lunar_date, lunar_info

from tools.common import add_common_args, config_from_args, resolve_date_range, dump_json


def _format_label(month: int, day: int, is_leap: bool) -> str:
    return f"{'闰' if is_leap else ''}{month:02d}/{day:02d}"


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lunar date (农历) check")
    add_common_args(parser)
    args = parser.parse_args(argv)

    start, end = resolve_date_range(parser, args)
    config = config_from_args(args)

    rows = []
    for cur, l in lunar_dates_between(start, end, inclusive=True, config=config.lunisolar):
        info = lunar_info(cur, config=config)
        label = _format_label(l.month, l.day, l.is_leap)

        if args.json:
            rows.append(
                {
                    "date": cur.isoformat(),
                    "year": l.year,
                    "month": l.month,
                    "day": l.day,
                    "leap": l.is_leap,
                    "label": label,
                    "lunar_date": format_lunar_date(l),
                    "year_name": year_stem_branch(l.year),
                    "zodiac": zodiac_animal(l.year),
                    "solar_term": info.solar_term,
                    "festival": info.festival,
                    "display": info.display,
                }
            )
        else:
            sep = "\n" if (args.verbose and l.day == 1 and cur != start) else ""
            print(f"{sep}{cur.isoformat()}  L={label}  year={l.year}  {info.display}")

    if args.json:
        dump_json({"rows": rows})


if __name__ == "__main__":
    main()
