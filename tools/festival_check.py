from __future__ import annotations

"""
Festival check script: list traditional festivals in a date range.

Uses:
- nongli.core.lunisolar.lunar_dates_between
- nongli.features.festivals.festival_info_from_lunar_date
"""

import argparse
from typing import List, Optional

from nongli.core.lunisolar import lunar_dates_between
from nongli.features.festivals import festival_info_from_lunar_date

from tools.common import add_common_args, config_from_args, resolve_date_range, dump_json


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Traditional festival (传统节日) check")
    add_common_args(parser)
    args = parser.parse_args(argv)

    start, end = resolve_date_range(parser, args)
    config = config_from_args(args)

    rows = []
    for cur, l in lunar_dates_between(start, end, inclusive=True, config=config.lunisolar):
        fest = festival_info_from_lunar_date(l)
        if fest is None:
            continue
        rows.append({"date": cur.isoformat(), "key": fest.key, "name": fest.name})

    if args.json:
        dump_json({"festivals": rows})
        return

    for r in rows:
        if args.verbose:
            print(f"{r['date']}  {r['name']}  lunar={r['key']}")
        else:
            print(f"{r['date']}  {r['name']}")


if __name__ == "__main__":
    main()
