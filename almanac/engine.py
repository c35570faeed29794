"""
组件装配

按依赖顺序创建：放假数据 → 节假日判定 → 日期信息缓存 → 翻月导航。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .config import Config
from .facts import CalendarDayFacts, FactsCache
from .grid import MonthNavigator
from .holidays import HolidayClassifier, load_override_table

logger = logging.getLogger(__name__)


@dataclass
class Almanac:
    config: Config
    classifier: HolidayClassifier
    facts: FactsCache
    navigator: MonthNavigator

    @classmethod
    def from_config(
        cls,
        config: Config,
        clock: Optional[Callable[[], date]] = None,
    ) -> "Almanac":
        overrides = load_override_table(config.holiday_data_path)
        classifier = HolidayClassifier(overrides)
        facts = FactsCache(classifier, clock=clock, timezone=config.timezone)
        navigator = MonthNavigator.for_today(
            facts.today,
            min_year=config.min_year,
            max_year=config.max_year,
        )
        logger.debug("初始化完成，今天 %s", facts.today)
        return cls(config, classifier, facts, navigator)

    def tick(self, now: Optional[date] = None) -> CalendarDayFacts:
        """每秒调用一次，返回今天的信息。"""
        self.facts.refresh(now)
        return self.facts.today_facts()

    def go_to_today(self) -> None:
        self.navigator.go_to_today(self.facts.today)

    def month_facts(self) -> list[CalendarDayFacts]:
        """当前选中月份 42 格的信息。"""
        return self.facts.grid_facts(self.navigator.grid)
