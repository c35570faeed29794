"""
测试共享 Fixtures

提供所有测试模块共享的放假数据、判定器和固定时钟。
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import MappingProxyType
from zoneinfo import ZoneInfo

import pytest

from almanac.config import Config
from almanac.facts import FactsCache
from almanac.holidays import DayType, HolidayClassifier, load_override_table

# ═══════════════════════════════════════════════════════════
# 路径 Fixtures
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def fixtures_dir() -> Path:
    """返回 fixtures 目录路径。"""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_data_path(fixtures_dir: Path) -> Path:
    """小型放假数据样本。"""
    return fixtures_dir / "holidays-sample.json"


# ═══════════════════════════════════════════════════════════
# 配置 Fixtures
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def test_config(sample_data_path: Path) -> Config:
    """创建测试配置。"""
    return Config(
        timezone=ZoneInfo("Asia/Shanghai"),
        holiday_data_path=sample_data_path,
        min_year=1900,
        max_year=2075,
    )


# ═══════════════════════════════════════════════════════════
# 节假日 Fixtures
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def override_table():
    """手工构造的放假安排（2024 年部分日期）。"""
    return MappingProxyType({
        2024: MappingProxyType({
            101: DayType.HOLIDAY,
            204: DayType.WORKDAY,   # 周日调休上班
            210: DayType.HOLIDAY,
            211: DayType.HOLIDAY,
            212: DayType.HOLIDAY,
            213: DayType.HOLIDAY,
            218: DayType.WORKDAY,   # 周日调休上班
            501: DayType.HOLIDAY,
            502: DayType.HOLIDAY,
            503: DayType.HOLIDAY,
            1001: DayType.HOLIDAY,
            1002: DayType.HOLIDAY,
            1003: DayType.HOLIDAY,
        }),
    })


@pytest.fixture
def classifier(override_table) -> HolidayClassifier:
    """使用手工放假安排的判定器。"""
    return HolidayClassifier(override_table)


@pytest.fixture
def bundled_classifier() -> HolidayClassifier:
    """使用随包数据的判定器。"""
    return HolidayClassifier(load_override_table())


# ═══════════════════════════════════════════════════════════
# 时钟 Fixtures
# ═══════════════════════════════════════════════════════════


class FakeClock:
    """可手动拨动的时钟。"""

    def __init__(self, today: date):
        self.today = today
        self.calls = 0

    def __call__(self) -> date:
        self.calls += 1
        return self.today


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(date(2024, 2, 10))


@pytest.fixture
def facts_cache(classifier: HolidayClassifier, fake_clock: FakeClock) -> FactsCache:
    """今天固定为 2024-02-10 的信息缓存。"""
    return FactsCache(classifier, clock=fake_clock)
