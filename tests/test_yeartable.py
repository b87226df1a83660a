from __future__ import annotations

import pytest

from nongli.core.config import LuniSolarConfig
from nongli.core.yeartable import (
    LUNAR_INFO,
    is_big_month,
    leap_month,
    leap_month_days,
    month_count,
    month_days,
    year_days,
    year_info,
)


def test_table_covers_1900_to_2100():
    assert len(LUNAR_INFO) == 201
    assert year_info(1900) == 0x04BD8
    assert year_info(2100) == 0x0D520


@pytest.mark.parametrize(
    "year, expected",
    [(1900, 8), (2017, 6), (2020, 4), (2023, 2), (2024, 0), (2025, 6)],
)
def test_leap_month(year, expected):
    assert leap_month(year) == expected


def test_out_of_range_years_clamp_to_1900():
    assert leap_month(1899) == leap_month(1900)
    assert leap_month(2101) == leap_month(1900)
    assert year_info(-5) == year_info(1900)


def test_out_of_range_years_raise_under_strict_policy():
    strict = LuniSolarConfig(out_of_range_policy="raise")
    with pytest.raises(ValueError):
        year_info(1899, config=strict)
    with pytest.raises(ValueError):
        leap_month(2101, config=strict)
    assert leap_month(2023, config=strict) == 2


def test_leap_month_size():
    # 2017: leap 6 is a big month; 2023: leap 2 is small
    assert is_big_month(2017, 13) is True
    assert leap_month_days(2017) == 30
    assert is_big_month(2023, 13) is False
    assert leap_month_days(2023) == 29


def test_month_13_without_leap_month_is_not_big():
    assert leap_month(2024) == 0
    assert is_big_month(2024, 13) is False
    assert leap_month_days(2024) == 0


@pytest.mark.parametrize("month", [0, -1, 14, 99])
def test_invalid_month_index_is_not_big(month):
    assert is_big_month(2024, month) is False


def test_month_days_rejects_leap_index():
    with pytest.raises(ValueError):
        month_days(2024, 13)


def test_regular_month_bits():
    # 0x04bd8 -> months 1..12 bits 0100 1011 1101
    expected = [29, 30, 29, 29, 30, 29, 30, 30, 30, 30, 29, 30]
    assert [month_days(1900, m) for m in range(1, 13)] == expected


@pytest.mark.parametrize(
    "year, days, count",
    [(1900, 384, 13), (2017, 384, 13), (2023, 384, 13), (2024, 354, 12), (2100, 354, 12)],
)
def test_year_days(year, days, count):
    assert year_days(year) == days
    assert month_count(year) == count


def test_year_days_is_sum_of_effective_months():
    for year in range(1900, 2101):
        total = sum(30 if is_big_month(year, m) else 29 for m in range(1, 13))
        if leap_month(year) > 0:
            total += 30 if is_big_month(year, 13) else 29
        assert year_days(year) == total
        assert 353 <= total <= 385
