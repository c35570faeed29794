"""
法定节假日 / 调休上班日判定

数据来源有三：
1. 国务院每年公布的放假安排（打包的 JSON，启动时加载一次，只读）
2. 固定公历节日表（元旦、劳动节、国庆节），只负责起名字
3. 兜底的名称映射

判定优先级：放假安排 > 固定节日表 > 普通日子。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum, IntEnum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .terms import day_key

logger = logging.getLogger(__name__)

GENERIC_HOLIDAY_NAME = "节假日"
REST_MARKER = "休"
WORK_MARKER = "班"

FIXED_HOLIDAYS: Mapping[int, str] = MappingProxyType({
    101: "元旦",
    501: "劳动节",
    1001: "国庆节",
})

# 放假安排里标记为假日、但固定节日表没给名字时的最后手段
_FALLBACK_NAMES: Mapping[int, str] = MappingProxyType({
    101: "元旦",
    501: "劳动节",
    1001: "国庆节",
})


class DayType(IntEnum):
    """放假安排 JSON 里的取值。"""

    WORKDAY = 1
    HOLIDAY = 2


class DayKind(Enum):
    ORDINARY = "ordinary"
    HOLIDAY = "holiday"
    WORKDAY = "workday"


@dataclass(frozen=True)
class Classification:
    """一天的判定结果。name 只在假日时有值。"""

    kind: DayKind
    name: Optional[str] = None

    @property
    def is_holiday(self) -> bool:
        return self.kind is DayKind.HOLIDAY

    @property
    def is_workday(self) -> bool:
        return self.kind is DayKind.WORKDAY


ORDINARY = Classification(DayKind.ORDINARY)
WORKDAY = Classification(DayKind.WORKDAY)

HolidayOverrideTable = Mapping[int, Mapping[int, DayType]]

EMPTY_OVERRIDES: HolidayOverrideTable = MappingProxyType({})


def default_dataset_path() -> Path:
    """随包发布的中国大陆放假安排。"""
    return Path(__file__).resolve().parent / "data" / "mainland-china.json"


def _parse_year(raw_year: str, raw_days: object) -> dict[int, DayType]:
    days: dict[int, DayType] = {}
    if not isinstance(raw_days, dict):
        logger.warning("放假数据 %s 年格式错误，已跳过", raw_year)
        return days

    for raw_key, raw_code in raw_days.items():
        if not (isinstance(raw_key, str) and len(raw_key) == 4 and raw_key.isdigit()):
            logger.warning("放假数据 %s 年存在无效日期键 %r，已跳过", raw_year, raw_key)
            continue
        # JSON 里的 true / 2.0 也能被 DayType 接受，只认整数 1、2
        if type(raw_code) is not int:
            logger.warning("放假数据 %s-%s 取值 %r 无效，已跳过", raw_year, raw_key, raw_code)
            continue
        try:
            day_type = DayType(raw_code)
        except ValueError:
            logger.warning("放假数据 %s-%s 取值 %r 无效，已跳过", raw_year, raw_key, raw_code)
            continue
        days[int(raw_key)] = day_type
    return days


def parse_override_table(raw: object) -> HolidayOverrideTable:
    """把解析好的 JSON 对象转成只读的 {年: {日键: DayType}}。"""
    if not isinstance(raw, dict):
        logger.warning("放假数据顶层不是对象，忽略全部放假安排")
        return EMPTY_OVERRIDES

    table: dict[int, Mapping[int, DayType]] = {}
    for raw_year, raw_days in raw.items():
        if not (isinstance(raw_year, str) and len(raw_year) == 4 and raw_year.isdigit()):
            logger.warning("放假数据存在无效年份键 %r，已跳过", raw_year)
            continue
        table[int(raw_year)] = MappingProxyType(_parse_year(raw_year, raw_days))
    return MappingProxyType(table)


def load_override_table(path: str | Path | None = None) -> HolidayOverrideTable:
    """
    加载放假安排

    文件缺失、读取失败或 JSON 损坏时只记一条警告，返回空表，
    此时仍可按固定节日表判定。

    Args:
        path: JSON 路径，默认使用随包数据

    Returns:
        只读的放假安排表
    """
    path = Path(path) if path else default_dataset_path()
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning("放假数据文件不存在: %s，仅使用固定节日表", path)
        return EMPTY_OVERRIDES
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("读取放假数据失败: %s (%s)，仅使用固定节日表", path, e)
        return EMPTY_OVERRIDES
    except json.JSONDecodeError as e:
        logger.warning("放假数据 JSON 格式错误: %s (%s)，仅使用固定节日表", path, e)
        return EMPTY_OVERRIDES

    table = parse_override_table(raw)
    logger.info("放假数据加载完成: %s，共 %d 个年份", path, len(table))
    return table


class HolidayClassifier:
    """判定某天是普通日子、法定假日还是调休上班日"""

    def __init__(
        self,
        overrides: HolidayOverrideTable = EMPTY_OVERRIDES,
        fixed_holidays: Mapping[int, str] = FIXED_HOLIDAYS,
    ):
        self.overrides = overrides
        self.fixed_holidays = fixed_holidays

    @property
    def years(self) -> list[int]:
        """有放假安排的年份。"""
        return sorted(self.overrides)

    def override_for(self, d: date) -> Optional[DayType]:
        year_table = self.overrides.get(d.year)
        if year_table is None:
            return None
        return year_table.get(day_key(d))

    def classify(self, d: date) -> Classification:
        """
        判定一天的类型

        1. 放假安排有记录：假日则取名字，调休上班日直接返回
        2. 没有记录时查固定节日表
        3. 都没有则是普通日子
        """
        key = day_key(d)
        override = self.override_for(d)

        if override is DayType.WORKDAY:
            return WORKDAY
        if override is DayType.HOLIDAY:
            return Classification(DayKind.HOLIDAY, self._resolve_name(key))

        name = self.fixed_holidays.get(key)
        if name:
            return Classification(DayKind.HOLIDAY, name)
        return ORDINARY

    def _resolve_name(self, key: int) -> str:
        # 春节、中秋等农历节日在这里只能拿到通用名称
        return self.fixed_holidays.get(key) or _FALLBACK_NAMES.get(key) or GENERIC_HOLIDAY_NAME

    def is_holiday(self, d: date) -> bool:
        return self.classify(d).is_holiday

    def is_workday(self, d: date) -> bool:
        return self.classify(d).is_workday

    def holiday_name(self, d: date) -> Optional[str]:
        return self.classify(d).name

    def is_first_day_of_holiday(self, d: date) -> bool:
        """假期第一天：今天放假，昨天不放假。"""
        if not self.is_holiday(d):
            return False
        try:
            previous = d - timedelta(days=1)
        except OverflowError:
            return True
        return not self.is_holiday(previous)

    def holiday_label(self, d: date) -> Optional[str]:
        """假期第一天给节日名，其余几天只给 '休'，非假日返回 None。"""
        classification = self.classify(d)
        if not classification.is_holiday:
            return None
        if self.is_first_day_of_holiday(d):
            return classification.name
        return REST_MARKER

    def badge(self, d: date) -> Optional[str]:
        """日期角标：假日 '休'，调休上班 '班'。"""
        classification = self.classify(d)
        if classification.is_holiday:
            return REST_MARKER
        if classification.is_workday:
            return WORK_MARKER
        return None
