"""
日期信息汇总

把农历、节气、星座、节假日拼成一条 CalendarDayFacts，供日历界面直接使用。
"今天" 的快照由外部时钟（每秒一次）刷新，日期不变时复用已算好的结果。
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo

from .grid import DayCell
from .holidays import HolidayClassifier
from .lunar import LunarDate, to_lunar
from .terms import (
    chinese_month_text,
    lunar_day_text,
    solar_term_name,
    zodiac_sign,
    zodiac_year_text,
)

logger = logging.getLogger(__name__)

# 沿用原有显示习惯，在平台周序号上固定加 1
WEEK_OF_YEAR_OFFSET = 1

DEFAULT_TIMEZONE = ZoneInfo("Asia/Shanghai")


@dataclass(frozen=True)
class CalendarDayFacts:
    """某一天的全部显示信息"""
    date: date
    is_weekend: bool
    is_today: bool
    is_holiday: bool
    is_workday: bool  # 调休上班日
    holiday_name: Optional[str]
    is_first_holiday_day: bool
    is_solar_term: bool
    solar_term_name: Optional[str]
    lunar: LunarDate
    lunar_display_text: str
    zodiac_sign: str
    zodiac_year_text: str
    zodiac_month_text: str
    day_of_year: int
    week_of_year: int
    in_month: bool = True


def day_of_year(d: date) -> int:
    """一年中的第几天，从 1 开始。"""
    return d.timetuple().tm_yday


def _sunday_week_of_year(d: date) -> int:
    # 周日开头；含 1 月 1 日的那一周算第 1 周，所以年末几天可能落到下一年的第 1 周。
    # 只用序号运算，9999-12-31 和 0001-01-01 也不越界
    weekday = d.isoweekday() % 7
    if d.month == 12 and 31 - d.day < 6 - weekday:
        return 1
    jan1_offset = date(d.year, 1, 1).isoweekday() % 7
    return (day_of_year(d) - 1 + jan1_offset) // 7 + 1


def week_of_year(d: date) -> int:
    return _sunday_week_of_year(d) + WEEK_OF_YEAR_OFFSET


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def display_text(facts: CalendarDayFacts) -> str:
    """
    格子下方只显示一项，优先级固定：
    节气 > 假期第一天的节日名 > 农历日期
    """
    if facts.solar_term_name:
        return facts.solar_term_name
    if facts.is_first_holiday_day and facts.holiday_name:
        return facts.holiday_name
    return facts.lunar_display_text


def summary_lines(facts: CalendarDayFacts) -> tuple[str, str]:
    """日历顶部的两行摘要。"""
    return (
        f"第{facts.day_of_year}天·第{facts.week_of_year}周 {facts.zodiac_sign}月",
        f"{facts.zodiac_year_text} {facts.zodiac_month_text}月",
    )


class FactsCache:
    """按需组装 CalendarDayFacts，并缓存 "今天" 的快照"""

    def __init__(
        self,
        classifier: HolidayClassifier,
        clock: Optional[Callable[[], date]] = None,
        timezone: ZoneInfo = DEFAULT_TIMEZONE,
    ):
        self.classifier = classifier
        self.timezone = timezone
        self._clock = clock or self._system_today
        self._lock = threading.Lock()
        self._today = self._clock()
        self._today_facts: Optional[CalendarDayFacts] = None

    def _system_today(self) -> date:
        return datetime.now(tz=self.timezone).date()

    @property
    def today(self) -> date:
        return self._today

    def refresh(self, now: Optional[date] = None) -> date:
        """由定时器调用：读一次时钟，更新今天的快照。"""
        today = now or self._clock()
        with self._lock:
            if today != self._today:
                logger.debug("日期变化: %s -> %s", self._today, today)
                self._today = today
                self._today_facts = None
        return today

    def is_today(self, d: date) -> bool:
        today = self._today
        return d.year == today.year and d.month == today.month and d.day == today.day

    def facts_for(self, d: date, in_month: bool = True) -> CalendarDayFacts:
        classification = self.classifier.classify(d)
        lunar = to_lunar(d)
        term = solar_term_name(d)
        return CalendarDayFacts(
            date=d,
            is_weekend=is_weekend(d),
            is_today=self.is_today(d),
            is_holiday=classification.is_holiday,
            is_workday=classification.is_workday,
            holiday_name=classification.name,
            is_first_holiday_day=classification.is_holiday and self.classifier.is_first_day_of_holiday(d),
            is_solar_term=term is not None,
            solar_term_name=term,
            lunar=lunar,
            lunar_display_text=lunar_day_text(lunar),
            zodiac_sign=zodiac_sign(d),
            zodiac_year_text=zodiac_year_text(d.year),
            zodiac_month_text=chinese_month_text(lunar.month),
            day_of_year=day_of_year(d),
            week_of_year=week_of_year(d),
            in_month=in_month,
        )

    def today_facts(self) -> CalendarDayFacts:
        """今天的信息，日期没变就复用。"""
        with self._lock:
            if self._today_facts is None:
                self._today_facts = self.facts_for(self._today)
            return self._today_facts

    def grid_facts(self, cells: Iterable[DayCell]) -> list[CalendarDayFacts]:
        return [self.facts_for(cell.date, cell.in_month) for cell in cells]
