"""
月视图网格

固定 6 行 × 7 列共 42 格，周日开头：
上月末尾几天 + 本月全部日期 + 下月开头几天。
"""

from __future__ import annotations

import calendar
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_SIZE = GRID_ROWS * GRID_COLUMNS

DEFAULT_MIN_YEAR = 1900
DEFAULT_MAX_YEAR = 2075

WEEKDAY_HEADERS = ("周日", "周一", "周二", "周三", "周四", "周五", "周六")


@dataclass(frozen=True)
class DayCell:
    """网格中的一格"""
    date: date
    in_month: bool  # 是否属于当前请求的月份


MonthGrid = tuple[DayCell, ...]

T = TypeVar("T")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """当月 1 号是星期几，周日为 1，周六为 7。"""
    return date(year, month, 1).isoweekday() % 7 + 1


def build_grid(year: int, month: int) -> MonthGrid:
    """
    生成 42 格月视图

    0001 年 1 月前面没有上月、9999 年 12 月后面没有下月，
    这两个月把整块网格挪回可表示的范围内，格数和本月日期不变，只是 1 号不再对齐周日列。

    Args:
        year: 公历年
        month: 公历月 1-12

    Returns:
        按行优先排列的 42 个 DayCell
    """
    first = date(year, month, 1).toordinal()
    aligned = first - (first_weekday(year, month) - 1)
    start = max(date.min.toordinal(), min(aligned, date.max.toordinal() - GRID_SIZE + 1))
    if start != aligned:
        logger.debug("%s-%02d 的网格超出可表示日期，已平移", year, month)
    return tuple(
        DayCell(day, day.year == year and day.month == month)
        for day in (date.fromordinal(start + i) for i in range(GRID_SIZE))
    )


def grid_rows(cells: Sequence[T]) -> list[list[T]]:
    """按周切成 6 行，网格和对应的 facts 列表都适用。"""
    return [list(cells[i:i + GRID_COLUMNS]) for i in range(0, len(cells), GRID_COLUMNS)]


class GridCache:
    """只缓存最近一次生成的网格，年月不变时直接复用"""

    def __init__(self):
        self._lock = threading.Lock()
        self._key: Optional[tuple[int, int]] = None
        self._grid: MonthGrid = ()
        self.builds = 0

    @property
    def key(self) -> Optional[tuple[int, int]]:
        return self._key

    def get(self, year: int, month: int) -> MonthGrid:
        with self._lock:
            if self._key != (year, month):
                self._grid = build_grid(year, month)
                self._key = (year, month)
                self.builds += 1
                logger.debug("重新生成月视图: %d-%02d", year, month)
            return self._grid


class MonthNavigator:
    """当前选中的年月，负责翻月、回到今天，并提供缓存的网格"""

    def __init__(
        self,
        year: int,
        month: int,
        min_year: int = DEFAULT_MIN_YEAR,
        max_year: int = DEFAULT_MAX_YEAR,
        cache: Optional[GridCache] = None,
    ):
        if min_year > max_year:
            raise ValueError(f"min_year {min_year} > max_year {max_year}")
        self.min_year = min_year
        self.max_year = max_year
        self.cache = cache or GridCache()
        self.year = min_year
        self.month = 1
        self.select(year, month)

    @classmethod
    def for_today(cls, today: date, **kwargs) -> "MonthNavigator":
        return cls(today.year, today.month, **kwargs)

    def select(self, year: int, month: int) -> None:
        """直接跳到某年某月，年份超出范围时夹到边界。"""
        if month < 1 or month > 12:
            raise ValueError(f"invalid month: {month}")
        self.year = min(max(year, self.min_year), self.max_year)
        self.month = month

    def previous_month(self) -> None:
        # 已经是最早一年的一月时不动
        if self.month == 1 and self.year > self.min_year:
            self.year -= 1
            self.month = 12
        elif self.month > 1:
            self.month -= 1

    def next_month(self) -> None:
        # 已经是最晚一年的十二月时不动
        if self.month == 12 and self.year < self.max_year:
            self.year += 1
            self.month = 1
        elif self.month < 12:
            self.month += 1

    def go_to_today(self, today: date) -> None:
        self.select(today.year, today.month)

    @property
    def grid(self) -> MonthGrid:
        return self.cache.get(self.year, self.month)
