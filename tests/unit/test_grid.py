"""
月视图网格单元测试
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from almanac.grid import (
    GRID_SIZE,
    DayCell,
    GridCache,
    MonthNavigator,
    build_grid,
    days_in_month,
    first_weekday,
    grid_rows,
)


@pytest.mark.unit
class TestBuildGrid:
    """测试 42 格生成。"""

    def test_february_2024(self) -> None:
        """测试 2024 年 2 月：1 号是周四，前面补 4 天。"""
        grid = build_grid(2024, 2)
        assert len(grid) == 42
        assert first_weekday(2024, 2) == 5
        assert grid[0] == DayCell(date(2024, 1, 28), False)
        assert grid[4] == DayCell(date(2024, 2, 1), True)
        assert grid[0].date.weekday() == 6  # 周日开头
        assert grid[-1] == DayCell(date(2024, 3, 9), False)

    def test_month_starting_on_sunday(self) -> None:
        """测试 1 号是周日时不补上月日期。"""
        grid = build_grid(2023, 10)
        assert grid[0] == DayCell(date(2023, 10, 1), True)

    def test_month_starting_on_saturday(self) -> None:
        """测试 1 号是周六时补满 6 天。"""
        grid = build_grid(2024, 6)
        assert sum(1 for cell in grid[:7] if not cell.in_month) == 6
        assert grid[6].date == date(2024, 6, 1)

    def test_year_boundaries(self) -> None:
        """测试跨年：1 月前补上一年 12 月，12 月后补下一年 1 月。"""
        january = build_grid(2025, 1)
        assert january[0].date == date(2024, 12, 29)
        december = build_grid(2024, 12)
        assert december[-1].date.year == 2025

    def test_all_months_invariants(self) -> None:
        """测试所有月份：42 格、日期连续、本月格子连续且数量等于当月天数。"""
        for year in (1900, 2000, 2023, 2024, 2075):
            for month in range(1, 13):
                grid = build_grid(year, month)
                assert len(grid) == GRID_SIZE
                for previous, current in zip(grid, grid[1:]):
                    assert current.date - previous.date == timedelta(days=1)

                flags = [cell.in_month for cell in grid]
                start = flags.index(True)
                run = flags[start:start + days_in_month(year, month)]
                assert all(run)
                assert sum(flags) == days_in_month(year, month)
                assert grid[start].date == date(year, month, 1)
                assert grid[start].date.isoweekday() % 7 == start

    def test_representable_date_limits(self) -> None:
        """测试 0001 年 1 月和 9999 年 12 月：网格平移到可表示范围，仍是 42 格且含整月。"""
        first = build_grid(1, 1)
        assert len(first) == GRID_SIZE
        assert first[0].date == date.min
        assert sum(cell.in_month for cell in first) == 31

        last = build_grid(9999, 12)
        assert len(last) == GRID_SIZE
        assert last[-1].date == date.max
        assert last[0].date == date(9999, 11, 20)
        assert sum(cell.in_month for cell in last) == 31
        for previous, current in zip(last, last[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_grid_rows(self) -> None:
        rows = grid_rows(build_grid(2024, 2))
        assert len(rows) == 6
        assert all(len(row) == 7 for row in rows)

    def test_days_in_month(self) -> None:
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(1900, 2) == 28


@pytest.mark.unit
class TestGridCache:
    """测试单槽缓存。"""

    def test_reuse_same_key(self) -> None:
        cache = GridCache()
        first = cache.get(2024, 2)
        second = cache.get(2024, 2)
        assert first is second
        assert cache.builds == 1
        assert cache.key == (2024, 2)

    def test_rebuild_on_key_change(self) -> None:
        cache = GridCache()
        cache.get(2024, 2)
        cache.get(2024, 3)
        cache.get(2024, 2)
        assert cache.builds == 3


@pytest.mark.unit
class TestMonthNavigator:
    """测试翻月。"""

    def test_forward_then_back_is_identical(self) -> None:
        """测试先往后翻再翻回来，网格逐格相同。"""
        navigator = MonthNavigator(2024, 12)
        original = navigator.grid
        navigator.next_month()
        assert (navigator.year, navigator.month) == (2025, 1)
        navigator.previous_month()
        assert (navigator.year, navigator.month) == (2024, 12)
        assert navigator.grid == original

    def test_timer_ticks_do_not_rebuild(self) -> None:
        """测试年月不变时反复读取不会重新生成。"""
        navigator = MonthNavigator(2024, 2)
        for _ in range(10):
            navigator.grid
        assert navigator.cache.builds == 1

    def test_lower_bound(self) -> None:
        """测试最早一年一月再往前翻不动。"""
        navigator = MonthNavigator(1900, 1)
        navigator.previous_month()
        assert (navigator.year, navigator.month) == (1900, 1)

    def test_upper_bound(self) -> None:
        navigator = MonthNavigator(2075, 12)
        navigator.next_month()
        assert (navigator.year, navigator.month) == (2075, 12)

    def test_select_clamps_year(self) -> None:
        navigator = MonthNavigator(2024, 2)
        navigator.select(1800, 5)
        assert (navigator.year, navigator.month) == (1900, 5)
        navigator.select(3000, 5)
        assert (navigator.year, navigator.month) == (2075, 5)

    def test_select_invalid_month(self) -> None:
        navigator = MonthNavigator(2024, 2)
        with pytest.raises(ValueError):
            navigator.select(2024, 13)

    def test_go_to_today(self) -> None:
        navigator = MonthNavigator(2000, 1)
        navigator.go_to_today(date(2024, 2, 10))
        assert (navigator.year, navigator.month) == (2024, 2)

    def test_custom_range(self) -> None:
        navigator = MonthNavigator(2024, 1, min_year=2024, max_year=2024)
        navigator.previous_month()
        assert (navigator.year, navigator.month) == (2024, 1)

    def test_invalid_range(self) -> None:
        with pytest.raises(ValueError):
            MonthNavigator(2024, 1, min_year=2030, max_year=2020)
