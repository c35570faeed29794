"""农历换算（查表法，1900-2100）。

每年一个编码整数，按月累加天数即可从公历日期推出农历年月日。
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date

from .terms import chinese_day_text, chinese_month_text, stem_branch

logger = logging.getLogger(__name__)

LUNAR_MIN_YEAR = 1900
LUNAR_MAX_YEAR = 2100

# 农历正月初一 (1900)
BASE_DATE = date(1900, 1, 31)

# Standard lunar data table (1900-2100), commonly used with HKO-based encoding.
# Encoding per year:
# - low 4 bits: leap month (0 means no leap month)
# - bit 16 (0x10000): leap month length (1 -> 30 days, 0 -> 29 days)
# - bits 15..4: month lengths for months 1..12 (1 -> 30 days, 0 -> 29 days)
LUNAR_DATA = (
    0x04BD8, 0x04AE0, 0x0A570, 0x054D5, 0x0D260, 0x0D950, 0x16554, 0x056A0,
    0x09AD0, 0x055D2, 0x04AE0, 0x0A5B6, 0x0A4D0, 0x0D250, 0x1D255, 0x0B540,
    0x0D6A0, 0x0ADA2, 0x095B0, 0x14977, 0x04970, 0x0A4B0, 0x0B4B5, 0x06A50,
    0x06D40, 0x1AB54, 0x02B60, 0x09570, 0x052F2, 0x04970, 0x06566, 0x0D4A0,
    0x0EA50, 0x06E95, 0x05AD0, 0x02B60, 0x186E3, 0x092E0, 0x1C8D7, 0x0C950,
    0x0D4A0, 0x1D8A6, 0x0B550, 0x056A0, 0x1A5B4, 0x025D0, 0x092D0, 0x0D2B2,
    0x0A950, 0x0B557, 0x06CA0, 0x0B550, 0x15355, 0x04DA0, 0x0A5D0, 0x14573,
    0x052D0, 0x0A9A8, 0x0E950, 0x06AA0, 0x0AEA6, 0x0AB50, 0x04B60, 0x0AAE4,
    0x0A570, 0x05260, 0x0F263, 0x0D950, 0x05B57, 0x056A0, 0x096D0, 0x04DD5,
    0x04AD0, 0x0A4D0, 0x0D4D4, 0x0D250, 0x0D558, 0x0B540, 0x0B6A0, 0x195A6,
    0x095B0, 0x049B0, 0x0A974, 0x0A4B0, 0x0B27A, 0x06A50, 0x06D40, 0x0AF46,
    0x0AB60, 0x09570, 0x04AF5, 0x04970, 0x064B0, 0x074A3, 0x0EA50, 0x06B58,
    0x055C0, 0x0AB60, 0x096D5, 0x092E0, 0x0C960, 0x0D954, 0x0D4A0, 0x0DA50,
    0x07552, 0x056A0, 0x0ABB7, 0x025D0, 0x092D0, 0x0CAB5, 0x0A950, 0x0B4A0,
    0x0BAA4, 0x0AD50, 0x055D9, 0x04BA0, 0x0A5B0, 0x15176, 0x052B0, 0x0A930,
    0x07954, 0x06AA0, 0x0AD50, 0x05B52, 0x04B60, 0x0A6E6, 0x0A4E0, 0x0D260,
    0x0EA65, 0x0D530, 0x05AA0, 0x076A3, 0x096D0, 0x04BD7, 0x04AD0, 0x0A4D0,
    0x1D0B6, 0x0D250, 0x0D520, 0x0DD45, 0x0B5A0, 0x056D0, 0x055B2, 0x049B0,
    0x0A577, 0x0A4B0, 0x0AA50, 0x1B255, 0x06D20, 0x0ADA0, 0x14B63, 0x09370,
    0x049F8, 0x04970, 0x064B0, 0x168A6, 0x0EA50, 0x06B20, 0x1A6C4, 0x0AAE0,
    0x0A2E0, 0x0D2E3, 0x0C960, 0x0D557, 0x0D4A0, 0x0DA50, 0x05D55, 0x056A0,
    0x0A6D0, 0x055D4, 0x052D0, 0x0A9B8, 0x0A950, 0x0B4A0, 0x0B6A6, 0x0AD50,
    0x055A0, 0x0ABA4, 0x0A5B0, 0x052B0, 0x0B273, 0x06930, 0x07337, 0x06AA0,
    0x0AD50, 0x14B55, 0x04B60, 0x0A570, 0x054E4, 0x0D160, 0x0E968, 0x0D520,
    0x0DAA0, 0x16AA6, 0x056D0, 0x04AE0, 0x0A9D4, 0x0A2D0, 0x0D150, 0x0F252,
    0x0D520,
)


@dataclass(frozen=True)
class LunarDate:
    """农历日期。月份 1-12，日 1-30；闰月只记录，不参与显示。"""

    year: int
    month: int
    day: int
    is_leap: bool = False

    @property
    def year_name(self) -> str:
        """农历年的干支名，如 '甲辰'。"""
        return stem_branch(self.year)


def _decode_year(data: int) -> tuple[tuple[int, bool, int], ...]:
    # 低 4 位是闰月，0x8000 ~ 0x10 依次是正月到腊月的大小月，0x10000 是闰月大小
    leap = data & 0xF
    months = []
    for month in range(1, 13):
        months.append((month, False, 30 if data & (0x10000 >> month) else 29))
        if month == leap:
            months.append((month, True, 30 if data & 0x10000 else 29))
    return tuple(months)


# 每年按先后顺序排好的 (月, 是否闰月, 天数)
_MONTHS = tuple(_decode_year(data) for data in LUNAR_DATA)


def _months_of(year: int) -> tuple[tuple[int, bool, int], ...]:
    if not LUNAR_MIN_YEAR <= year <= LUNAR_MAX_YEAR:
        raise ValueError(f"lunar year out of range: {year}")
    return _MONTHS[year - LUNAR_MIN_YEAR]


def leap_month(year: int) -> int:
    """返回闰几月，无闰月返回 0。"""
    return next((month for month, is_leap, _ in _months_of(year) if is_leap), 0)


def leap_month_days(year: int) -> int:
    return next((days for _, is_leap, days in _months_of(year) if is_leap), 0)


def lunar_month_days(year: int, month: int) -> int:
    if month < 1 or month > 12:
        raise ValueError(f"invalid lunar month: {month}")
    return next(days for m, is_leap, days in _months_of(year) if m == month and not is_leap)


def lunar_year_days(year: int) -> int:
    return sum(days for _, _, days in _months_of(year))


def _build_year_starts() -> tuple[int, ...]:
    # 每个农历年正月初一的公历序数，多出一项作为表尾
    starts = [BASE_DATE.toordinal()]
    for months in _MONTHS:
        starts.append(starts[-1] + sum(days for _, _, days in months))
    return tuple(starts)


_YEAR_STARTS = _build_year_starts()


def _fallback(d: date) -> LunarDate:
    logger.debug("日期 %s 超出农历数据范围，按初一处理", d)
    return LunarDate(d.year, 1, 1)


def to_lunar(d: date) -> LunarDate:
    """公历转农历。超出 1900-01-31 ~ 2100 年末范围时返回该年正月初一。"""
    ordinal = d.toordinal()
    if ordinal < _YEAR_STARTS[0] or ordinal >= _YEAR_STARTS[-1]:
        return _fallback(d)

    index = bisect_right(_YEAR_STARTS, ordinal) - 1
    offset = ordinal - _YEAR_STARTS[index]
    for month, is_leap, days in _MONTHS[index]:
        if offset < days:
            return LunarDate(LUNAR_MIN_YEAR + index, month, offset + 1, is_leap)
        offset -= days

    # _YEAR_STARTS 与月长之和一致，走不到这里
    return _fallback(d)


def lunar_to_text(lunar: LunarDate) -> str:
    """完整农历文本，如 '正月初三'、'闰二月十五'。"""
    month_name = chinese_month_text(lunar.month)
    if lunar.is_leap:
        month_name = f"闰{month_name}"
    return f"{month_name}月{chinese_day_text(lunar.day)}"
