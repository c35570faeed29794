"""
集中配置管理

从环境变量 / .env 文件加载所有配置项，
并提供校验与默认值。
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .grid import DEFAULT_MAX_YEAR, DEFAULT_MIN_YEAR
from .holidays import default_dataset_path

DEFAULT_TZ_NAME = "Asia/Shanghai"


def _int_env(name: str, default: int) -> int:
    """读取整数环境变量，空值用默认值，非整数直接报错。"""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"环境变量 {name} 必须是整数，当前值: {raw!r}") from None


@dataclass(frozen=True)
class Config:
    """不可变配置对象，一次加载、全局使用。"""

    # ── 时间 ─────────────────────────────────────────────
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo(DEFAULT_TZ_NAME))

    # ── 数据 ─────────────────────────────────────────────
    holiday_data_path: Path = field(default_factory=default_dataset_path)

    # ── 翻月范围 ──────────────────────────────────────────
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR

    @classmethod
    def from_env(
        cls,
        env_path: str | Path | None = None,
        load_dotenv_file: bool = True,
    ) -> "Config":
        """从 .env 文件 + 环境变量构建 Config 实例。"""
        if env_path:
            load_dotenv(env_path, override=True)
        elif load_dotenv_file:
            # 优先级:
            # 1. 当前目录 .almanac/.env
            # 2. 当前目录 .env
            # 3. 项目根目录 .env (源码运行)
            project_root = Path(__file__).resolve().parent.parent
            candidates = [
                Path.cwd() / ".almanac" / ".env",
                Path.cwd() / ".env",
                project_root / ".env",
            ]
            for candidate in candidates:
                if candidate.exists():
                    load_dotenv(candidate, override=True)
                    break

        # 时区
        tz_name = os.getenv("ALMANAC_TZ", DEFAULT_TZ_NAME).strip() or DEFAULT_TZ_NAME
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            print(f"[WARN] 无法识别时区 '{tz_name}'，回退到 {DEFAULT_TZ_NAME}")
            tz = ZoneInfo(DEFAULT_TZ_NAME)

        raw_path = os.getenv("ALMANAC_HOLIDAY_DATA", "").strip()
        data_path = Path(raw_path).expanduser() if raw_path else default_dataset_path()

        min_year = _int_env("ALMANAC_MIN_YEAR", DEFAULT_MIN_YEAR)
        max_year = _int_env("ALMANAC_MAX_YEAR", DEFAULT_MAX_YEAR)
        if min_year > max_year:
            print(f"[ERROR] ALMANAC_MIN_YEAR ({min_year}) 不能大于 ALMANAC_MAX_YEAR ({max_year})")
            sys.exit(1)

        return cls(
            timezone=tz,
            holiday_data_path=data_path,
            min_year=min_year,
            max_year=max_year,
        )
