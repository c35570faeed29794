"""节气、星座、干支生肖与农历月日名称。

全部是纯函数查表，日期统一用整数键 month * 100 + day。
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import date
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .lunar import LunarDate

LUNAR_MONTH_NAMES = ("正", "二", "三", "四", "五", "六", "七", "八", "九", "十", "冬", "腊")
LUNAR_DAY_NAMES = (
    "初一", "初二", "初三", "初四", "初五", "初六", "初七", "初八", "初九", "初十",
    "十一", "十二", "十三", "十四", "十五", "十六", "十七", "十八", "十九", "二十",
    "廿一", "廿二", "廿三", "廿四", "廿五", "廿六", "廿七", "廿八", "廿九", "三十",
)

HEAVENLY_STEMS = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")
EARTHLY_BRANCHES = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")
ZODIAC_ANIMALS = ("鼠", "牛", "虎", "兔", "龙", "蛇", "马", "羊", "猴", "鸡", "狗", "猪")

# 每年固定日期的近似值，实际节气每年前后浮动一天左右
SOLAR_TERMS: dict[int, str] = {
    106: "小寒",
    120: "大寒",
    204: "立春",
    219: "雨水",
    305: "惊蛰",
    320: "春分",
    404: "清明",
    419: "谷雨",
    505: "立夏",
    521: "小满",
    605: "芒种",
    621: "夏至",
    706: "小暑",
    722: "大暑",
    807: "立秋",
    822: "处暑",
    907: "白露",
    922: "秋分",
    1008: "寒露",
    1023: "霜降",
    1107: "立冬",
    1122: "小雪",
    1206: "大雪",
    1221: "冬至",
}

# (起始日键, 星座)，起始日之前归上一个星座；1 月 20 日之前是摩羯座
_ZODIAC_SIGN_STARTS = (
    (120, "水瓶座"),
    (219, "双鱼座"),
    (321, "白羊座"),
    (420, "金牛座"),
    (521, "双子座"),
    (622, "巨蟹座"),
    (723, "狮子座"),
    (823, "处女座"),
    (923, "天秤座"),
    (1024, "天蝎座"),
    (1123, "射手座"),
    (1222, "摩羯座"),
)
_ZODIAC_SIGN_KEYS = tuple(start for start, _ in _ZODIAC_SIGN_STARTS)


def day_key(d: date) -> int:
    """整数日键，如 2 月 4 日 -> 204。"""
    return d.month * 100 + d.day


def is_solar_term(d: date) -> bool:
    return day_key(d) in SOLAR_TERMS


def solar_term_name(d: date) -> Optional[str]:
    return SOLAR_TERMS.get(day_key(d))


def zodiac_sign(d: date) -> str:
    """西方星座。边界日按区间表归属，不做插值。"""
    index = bisect_right(_ZODIAC_SIGN_KEYS, day_key(d)) - 1
    return _ZODIAC_SIGN_STARTS[index][1]


def stem_branch(year: int) -> str:
    """干支纪年，如 2024 -> '甲辰'。"""
    return HEAVENLY_STEMS[(year - 4) % 10] + EARTHLY_BRANCHES[(year - 4) % 12]


def zodiac_animal(year: int) -> str:
    return ZODIAC_ANIMALS[(year - 4) % 12]


def zodiac_year_text(year: int) -> str:
    """如 2024 -> '甲辰·龙年'。"""
    return f"{stem_branch(year)}·{zodiac_animal(year)}年"


def chinese_month_text(month: int) -> str:
    if month < 1 or month > 12:
        raise ValueError(f"invalid lunar month: {month}")
    return LUNAR_MONTH_NAMES[month - 1]


def chinese_day_text(day: int) -> str:
    if day < 1 or day > 30:
        raise ValueError(f"invalid lunar day: {day}")
    return LUNAR_DAY_NAMES[day - 1]


def lunar_day_text(lunar: "LunarDate") -> str:
    """格子里的农历文字：初一显示 'X月'，其余显示日名。"""
    if lunar.day == 1:
        return f"{chinese_month_text(lunar.month)}月"
    return chinese_day_text(lunar.day)
