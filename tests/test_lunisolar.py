from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from nongli.core.lunisolar import (
    EPOCH,
    LunarDate,
    lunar_dates_between,
    lunar_to_solar,
    solar_to_lunar,
)
from nongli.core.yeartable import leap_month, month_days, leap_month_days, year_days


def _ld(y, m, d, leap=False):
    return LunarDate(year=y, month=m, day=d, is_leap=leap)


def test_epoch_anchor():
    assert solar_to_lunar(date(1900, 1, 31)) == _ld(1900, 1, 1)


def test_pre_epoch_sentinel():
    assert solar_to_lunar(date(1900, 1, 1)) == _ld(1900, 1, 1)
    assert solar_to_lunar(date(1899, 6, 1)) == _ld(1900, 1, 1)


@pytest.mark.parametrize(
    "solar, lunar",
    [
        (date(2024, 2, 10), _ld(2024, 1, 1)),
        (date(2024, 9, 17), _ld(2024, 8, 15)),
        (date(2024, 6, 10), _ld(2024, 5, 5)),
        (date(2024, 2, 9), _ld(2023, 12, 30)),
        (date(2025, 1, 28), _ld(2024, 12, 29)),
        (date(2025, 1, 29), _ld(2025, 1, 1)),
        (date(2023, 1, 22), _ld(2023, 1, 1)),
        (date(2023, 4, 19), _ld(2023, 2, 30)),
        (date(2023, 4, 20), _ld(2023, 3, 1)),
        (date(2017, 8, 22), _ld(2017, 7, 1)),
    ],
)
def test_known_dates(solar, lunar):
    assert solar_to_lunar(solar) == lunar


def test_leap_month_is_walked_before_its_regular_month():
    # 2023 has leap month 2 (29 days)
    assert solar_to_lunar(date(2023, 2, 19)) == _ld(2023, 1, 29)
    assert solar_to_lunar(date(2023, 2, 20)) == _ld(2023, 2, 1, True)
    assert solar_to_lunar(date(2023, 2, 21)) == _ld(2023, 2, 2, True)
    assert solar_to_lunar(date(2023, 3, 21)) == _ld(2023, 2, 1)
    assert solar_to_lunar(date(2023, 3, 22)) == _ld(2023, 2, 2)


def test_big_leap_month_reaches_day_30():
    assert solar_to_lunar(date(2017, 6, 24)) == _ld(2017, 6, 1, True)
    assert solar_to_lunar(date(2017, 7, 23)) == _ld(2017, 6, 30, True)


def test_small_month_does_not_overflow_to_day_30():
    # 腊月 of lunar 2024 has 29 days
    assert month_days(2024, 12) == 29
    assert solar_to_lunar(date(2025, 1, 28)).day == 29
    assert solar_to_lunar(date(2025, 1, 29)) == _ld(2025, 1, 1)


def test_time_of_day_is_ignored():
    assert solar_to_lunar(datetime(2024, 9, 17, 23, 59, 59)) == _ld(2024, 8, 15)
    assert solar_to_lunar(datetime(2024, 9, 17, 0, 0)) == _ld(2024, 8, 15)
    assert solar_to_lunar("2024-09-17") == _ld(2024, 8, 15)


def test_walk_is_capped_after_2100():
    assert solar_to_lunar(date(2100, 12, 31)) == _ld(2100, 12, 1)
    assert solar_to_lunar(date(2101, 6, 1)) == _ld(2101, 1, 1)


def test_each_lunar_year_starts_where_the_previous_one_ends():
    cum = 0
    for year in range(1900, 2101):
        first = solar_to_lunar(EPOCH + timedelta(days=cum))
        assert (first.year, first.month, first.day) == (year, 1, 1)
        last = solar_to_lunar(EPOCH + timedelta(days=cum + year_days(year) - 1))
        assert last.year == year
        assert last.month == 12
        cum += year_days(year)


def test_consecutive_days_are_monotonic():
    prev = None
    for d, cur in lunar_dates_between(date(2016, 12, 1), date(2026, 3, 1)):
        if prev is not None:
            if cur.day == 1:
                length = leap_month_days(prev.year) if prev.is_leap else month_days(prev.year, prev.month)
                assert prev.day == length
                if prev.is_leap:
                    assert (cur.year, cur.month, cur.is_leap) == (prev.year, prev.month, False)
                elif prev.month == 12:
                    assert (cur.year, cur.month) == (prev.year + 1, 1)
                else:
                    assert cur.year == prev.year
                    assert cur.month == prev.month + 1
                    assert cur.is_leap == (leap_month(cur.year) == cur.month)
            else:
                assert (cur.year, cur.month, cur.is_leap) == (prev.year, prev.month, prev.is_leap)
                assert cur.day == prev.day + 1
        prev = cur


@pytest.mark.parametrize(
    "start, end",
    [
        (date(1900, 1, 20), date(1900, 3, 10)),
        (date(2022, 12, 1), date(2023, 6, 1)),
        (date(2100, 12, 1), date(2101, 3, 1)),
    ],
)
def test_range_matches_single_day_conversion(start, end):
    rows = list(lunar_dates_between(start, end))
    assert len(rows) == (end - start).days
    for d, ld in rows:
        assert ld == solar_to_lunar(d)


def test_range_is_half_open_and_empty_when_reversed():
    rows = list(lunar_dates_between("2024-09-16", "2024-09-18"))
    assert [d for d, _ in rows] == [date(2024, 9, 16), date(2024, 9, 17)]
    assert list(lunar_dates_between("2024-09-18", "2024-09-16")) == []


@pytest.mark.parametrize(
    "lunar, solar",
    [
        ((1900, 1, 1, False), date(1900, 1, 31)),
        ((2024, 8, 15, False), date(2024, 9, 17)),
        ((2023, 2, 2, True), date(2023, 2, 21)),
        ((2023, 2, 2, False), date(2023, 3, 22)),
        ((2024, 12, 29, False), date(2025, 1, 28)),
    ],
)
def test_lunar_to_solar(lunar, solar):
    assert lunar_to_solar(*lunar) == solar
    assert solar_to_lunar(solar) == _ld(*lunar)


@pytest.mark.parametrize(
    "args",
    [
        (1899, 1, 1, False),
        (2101, 1, 1, False),
        (2024, 13, 1, False),
        (2024, 0, 1, False),
        (2024, 2, 1, True),
        (2023, 1, 30, False),
        (2024, 1, 0, False),
    ],
)
def test_lunar_to_solar_rejects_missing_dates(args):
    with pytest.raises(ValueError):
        lunar_to_solar(*args)


def test_label():
    assert _ld(2023, 2, 2, True).label == "2023-L02-02"
    assert _ld(2024, 8, 15).label == "2024-08-15"


def test_inclusive_range_reaches_last_representable_date():
    rows = list(lunar_dates_between(date.max, date.max, inclusive=True))
    assert rows == [(date.max, solar_to_lunar(date.max))]
    assert list(lunar_dates_between(date.max, date.max)) == []

    rows = list(lunar_dates_between("2024-09-16", "2024-09-18", inclusive=True))
    assert [d for d, _ld in rows] == [date(2024, 9, 16), date(2024, 9, 17), date(2024, 9, 18)]
