from __future__ import annotations

"""
Feature-level configuration / constants.

- 天干地支 / 生肖: year -> stem-branch name, zodiac animal
- 农历月日: month/day -> display names
- 二十四节气: n(0..23) -> name / kind(节|中气)
- 传统节日: lunar "month-day" -> festival name

Design goals:
- Tables are module-level constants, never mutated.
- Invalid indices raise ValueError (callers in features/ never pass them).
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

# ============================================================
# 天干 / 地支 / 生肖
#   index = (year - 4) mod 10 / 12  (公元4年 = 甲子)
# ============================================================

HEAVENLY_STEMS: List[str] = ["甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸"]

EARTHLY_BRANCHES: List[str] = ["子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥"]

ZODIAC_ANIMALS: List[str] = ["鼠", "牛", "虎", "兔", "龙", "蛇", "马", "羊", "猴", "鸡", "狗", "猪"]


def year_stem_branch(year: int) -> str:
    """e.g. 2024 -> 甲辰"""
    y = int(year)
    return f"{HEAVENLY_STEMS[(y - 4) % 10]}{EARTHLY_BRANCHES[(y - 4) % 12]}"


def zodiac_animal(year: int) -> str:
    """e.g. 2024 -> 龙"""
    return ZODIAC_ANIMALS[(int(year) - 4) % 12]


# ============================================================
# 农历月名 / 日名
# ============================================================

LUNAR_MONTH_NAME_BY_MONTH_NO: Dict[int, str] = {
    1:  "正",
    2:  "二",
    3:  "三",
    4:  "四",
    5:  "五",
    6:  "六",
    7:  "七",
    8:  "八",
    9:  "九",
    10: "十",
    11: "冬",
    12: "腊",
}

LEAP_PREFIX = "闰"

LUNAR_DAY_NAMES: List[str] = [
    "初一", "初二", "初三", "初四", "初五", "初六", "初七", "初八", "初九", "初十",
    "十一", "十二", "十三", "十四", "十五", "十六", "十七", "十八", "十九", "二十",
    "廿一", "廿二", "廿三", "廿四", "廿五", "廿六", "廿七", "廿八", "廿九", "三十",
]


def lunar_month_name_from_month_no(month_no: int) -> str:
    m = int(month_no)
    try:
        return LUNAR_MONTH_NAME_BY_MONTH_NO[m]
    except KeyError as e:
        raise ValueError(f"invalid lunar month_no: {month_no}") from e


def lunar_month_display_name(month_no: int, is_leap: bool) -> str:
    """e.g. (8, False) -> 八月, (2, True) -> 闰二月"""
    base = f"{lunar_month_name_from_month_no(month_no)}月"
    return f"{LEAP_PREFIX}{base}" if is_leap else base


def lunar_day_name(day: int) -> str:
    d = int(day)
    if not (1 <= d <= 30):
        raise ValueError(f"lunar day out of range: {day}")
    return LUNAR_DAY_NAMES[d - 1]


# ============================================================
# 二十四节气
#   n follows the calendar year, starting at 小寒 (n=0).
#   kind:
#     n even -> 节   (sectional term)
#     n odd  -> 中气 (principal term)
# ============================================================

SOLAR_TERM_NAMES: List[str] = [
    "小寒", "大寒", "立春", "雨水", "惊蛰", "春分",
    "清明", "谷雨", "立夏", "小满", "芒种", "夏至",
    "小暑", "大暑", "立秋", "处暑", "白露", "秋分",
    "寒露", "霜降", "立冬", "小雪", "大雪", "冬至",
]

SOLAR_TERM_INDEX_BY_NAME: Dict[str, int] = {name: n for n, name in enumerate(SOLAR_TERM_NAMES)}


def solar_term_name(n: int) -> str:
    i = int(n)
    if not (0 <= i < len(SOLAR_TERM_NAMES)):
        raise ValueError(f"solar term index out of range: {n}")
    return SOLAR_TERM_NAMES[i]


def solar_term_kind(n: int) -> str:
    """
    Return "节" if n is even, else "中气".
    """
    return "节" if int(n) % 2 == 0 else "中气"


@dataclass(frozen=True)
class SolarTermInfo:
    """
    Structured info for a solar term index.
    """
    n: int
    name: str
    kind: str


def solar_term_info(n: int) -> SolarTermInfo:
    name = solar_term_name(n)
    return SolarTermInfo(n=int(n), name=name, kind=solar_term_kind(n))


# ============================================================
# 传统节日 (lunar month-day, regular months only)
#   12-29 and 12-30 both map to 除夕 so that a 29-day 腊月 still has one.
# ============================================================

TRADITIONAL_FESTIVALS: Dict[str, str] = {
    "1-1":   "春节",
    "1-15":  "元宵节",
    "2-2":   "龙抬头",
    "5-5":   "端午节",
    "7-7":   "七夕",
    "7-15":  "中元节",
    "8-15":  "中秋节",
    "9-9":   "重阳节",
    "10-15": "下元节",
    "12-8":  "腊八节",
    "12-23": "小年",
    "12-30": "除夕",
    "12-29": "除夕",
}


def festival_key(lunar_month: int, lunar_day: int) -> str:
    return f"{int(lunar_month)}-{int(lunar_day)}"


def festival_from_lunar_month_day(lunar_month: int, lunar_day: int, is_leap: bool = False) -> Optional[str]:
    """
    Festival name for a lunar month/day. Leap months never carry a festival.
    """
    if is_leap:
        return None
    return TRADITIONAL_FESTIVALS.get(festival_key(lunar_month, lunar_day))
