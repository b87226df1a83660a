from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from nongli.core.config import SolarTermConfig
from nongli.core.solarterms import (
    solar_term_date,
    solar_term_dates_for_year,
    solar_term_index_for_date,
    solar_term_instant_utc,
    solar_terms_between,
)
from nongli.features.config import SOLAR_TERM_NAMES, solar_term_info
from nongli.features.solar_terms import (
    solar_term_events_between,
    solar_term_events_between_as_objects,
    solar_term_for_date,
)

UTC = timezone.utc


def test_anchor_instant():
    assert solar_term_instant_utc(1900, 0) == datetime(1900, 1, 6, 2, 5, tzinfo=UTC)


def test_instant_formula():
    # 124 tropical years = 3913058820862.8 ms -> rounded to ...863
    assert solar_term_instant_utc(2024, 23) == datetime(2024, 12, 21, 15, 30, 0, 863000, tzinfo=UTC)


@pytest.mark.parametrize(
    "year, n, expected",
    [
        (2024, 0, date(2024, 1, 6)),
        (2024, 2, date(2024, 2, 4)),
        (2024, 5, date(2024, 3, 20)),
        (2024, 23, date(2024, 12, 21)),
        (2023, 11, date(2023, 6, 22)),
        (2025, 2, date(2025, 2, 4)),
    ],
)
def test_solar_term_date(year, n, expected):
    assert solar_term_date(year, n) == expected


def test_local_zone_moves_the_date():
    # 2025 立春 is 2025-02-03 20:27 UTC
    assert solar_term_date(2025, 2, config=SolarTermConfig(tz="UTC")) == date(2025, 2, 3)
    assert solar_term_date(2025, 2, config=SolarTermConfig(tz="Asia/Shanghai")) == date(2025, 2, 4)


@pytest.mark.parametrize("n", [-1, 24, 100])
def test_term_index_out_of_range(n):
    with pytest.raises(ValueError):
        solar_term_instant_utc(2024, n)


def test_year_terms_are_ordered_and_inside_the_year():
    rows = solar_term_dates_for_year(2024)
    assert [n for n, _ in rows] == list(range(24))
    days = [d for _, d in rows]
    assert days == sorted(days)
    assert all(d.year == 2024 for d in days)
    assert len(set(days)) == 24


def test_index_for_date():
    assert solar_term_index_for_date(date(2024, 12, 21)) == 23
    assert solar_term_index_for_date(datetime(2024, 12, 21, 8, 0)) == 23
    assert solar_term_index_for_date(date(2024, 12, 22)) is None
    assert solar_term_for_date("2024-12-21") == "冬至"
    assert solar_term_for_date("2023-06-22") == "夏至"
    assert solar_term_for_date("2024-09-17") is None


def test_terms_between_inclusive():
    rows = solar_terms_between(date(2024, 12, 6), date(2024, 12, 21))
    assert [n for n, _ in rows] == [22, 23]
    assert solar_terms_between(date(2024, 12, 8), date(2024, 12, 20)) == []
    with pytest.raises(ValueError):
        solar_terms_between(date(2024, 12, 21), date(2024, 12, 1))


def test_terms_between_spans_new_year():
    rows = solar_terms_between(date(2024, 12, 1), date(2025, 1, 31))
    assert [n for n, _ in rows] == [22, 23, 0, 1]


def test_events_between():
    events = solar_term_events_between("2024-12-01", "2024-12-31")
    assert [e["name"] for e in events] == ["大雪", "冬至"]
    assert [e["kind"] for e in events] == ["节", "中气"]
    assert events[1]["local_date"] == "2024-12-21"
    assert events[1]["local"].utcoffset().total_seconds() == 8 * 3600

    objs = solar_term_events_between_as_objects("2024-12-01", "2024-12-31")
    assert [o.n for o in objs] == [22, 23]
    assert objs[1].local_date == date(2024, 12, 21)


def test_term_names_and_kinds():
    assert len(SOLAR_TERM_NAMES) == 24
    assert solar_term_info(0).name == "小寒"
    assert solar_term_info(0).kind == "节"
    assert solar_term_info(23).name == "冬至"
    assert solar_term_info(23).kind == "中气"


def test_naive_base_instant_rejected():
    config = SolarTermConfig(base_utc=datetime(1900, 1, 6, 2, 5))
    with pytest.raises(ValueError):
        solar_term_instant_utc(2024, 0, config=config)


def test_terms_between_at_date_limits():
    assert solar_terms_between(date(1, 1, 1), date(1, 1, 2)) == []
    assert [n for n, _t in solar_terms_between(date(9999, 12, 1), date(9999, 12, 31))] == [22, 23]
