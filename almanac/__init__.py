"""农历、节气、星座与法定节假日的日历信息引擎。"""

from .facts import CalendarDayFacts, FactsCache, display_text
from .grid import DayCell, GridCache, MonthNavigator, build_grid
from .holidays import Classification, DayKind, DayType, HolidayClassifier, load_override_table
from .lunar import LunarDate, to_lunar

__version__ = "0.1.0"

__all__ = [
    "CalendarDayFacts",
    "Classification",
    "DayCell",
    "DayKind",
    "DayType",
    "FactsCache",
    "GridCache",
    "HolidayClassifier",
    "LunarDate",
    "MonthNavigator",
    "build_grid",
    "display_text",
    "load_override_table",
    "to_lunar",
]
