from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Config
from .engine import Almanac
from .facts import CalendarDayFacts, display_text, summary_lines
from .grid import WEEKDAY_HEADERS, grid_rows
from .holidays import REST_MARKER, WORK_MARKER, DayType, HolidayClassifier
from .lunar import lunar_to_text

app = typer.Typer(help="Almanac — 农历、节气、节假日日历")
console = Console()

BADGE_STYLES = {
    REST_MARKER: "white on red",
    WORK_MARKER: "white on dark_orange",
}


def _get_almanac(ctx: typer.Context) -> Almanac:
    return ctx.obj["almanac"]


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"日期格式应为 YYYY-MM-DD: {value}") from None


def _yes_no(flag: bool) -> str:
    return "[green]是[/green]" if flag else "否"


def _facts_table(facts: CalendarDayFacts, classifier: HolidayClassifier) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column()

    weekday = "周" + "一二三四五六日"[facts.date.weekday()]
    table.add_row("公历", f"{facts.date:%Y年%m月%d日} {weekday}")
    table.add_row("农历", f"{facts.lunar.year_name}年 {lunar_to_text(facts.lunar)}")
    table.add_row("显示", display_text(facts))
    table.add_row("生肖", facts.zodiac_year_text)
    table.add_row("星座", facts.zodiac_sign)
    table.add_row("节气", facts.solar_term_name or "-")
    table.add_row("周末", _yes_no(facts.is_weekend))
    table.add_row("法定假日", _yes_no(facts.is_holiday))
    label = classifier.holiday_label(facts.date)
    if label is not None:
        table.add_row("节日", label)
        table.add_row("假期首日", _yes_no(facts.is_first_holiday_day))
    table.add_row("调休上班", _yes_no(facts.is_workday))
    table.add_row("第几天", str(facts.day_of_year))
    table.add_row("第几周", str(facts.week_of_year))
    return table


def _cell_text(facts: CalendarDayFacts, classifier: HolidayClassifier) -> str:
    marker = classifier.badge(facts.date)
    badge = ""
    if marker is not None:
        style = BADGE_STYLES[marker]
        badge = f"[{style}]{marker}[/{style}]"

    day_style = "bold"
    if facts.is_holiday:
        day_style = "bold red"
    elif facts.is_weekend and facts.in_month:
        day_style = "bold magenta"
    if not facts.in_month:
        day_style = "dim"
    if facts.is_today:
        day_style = "reverse " + day_style

    sub_style = "dim"
    if facts.solar_term_name:
        sub_style = "blue"
    elif facts.is_first_holiday_day and facts.holiday_name:
        sub_style = "red"

    return (
        f"{badge}[{day_style}]{facts.date.day:>2}[/{day_style}]\n"
        f"[{sub_style}]{display_text(facts)}[/{sub_style}]"
    )


@app.callback()
def main(
    ctx: typer.Context,
    env: Optional[Path] = typer.Option(None, "--env", help=".env 文件路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """加载配置与放假数据。"""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )
    config = Config.from_env(env_path=env)
    ctx.obj = {"almanac": Almanac.from_config(config)}


@app.command()
def today(ctx: typer.Context) -> None:
    """显示今天的信息。"""
    almanac = _get_almanac(ctx)
    facts = almanac.tick()
    header, subheader = summary_lines(facts)
    console.print(Panel.fit(f"{header}\n{subheader}", style="bold green"))
    console.print(_facts_table(facts, almanac.classifier))


@app.command()
def day(
    ctx: typer.Context,
    value: str = typer.Argument(..., metavar="YYYY-MM-DD", help="公历日期"),
) -> None:
    """显示某一天的信息。"""
    almanac = _get_almanac(ctx)
    facts = almanac.facts.facts_for(_parse_date(value))
    console.print(_facts_table(facts, almanac.classifier))


@app.command()
def month(
    ctx: typer.Context,
    year: Optional[int] = typer.Argument(None, help="公历年，默认今年"),
    month: Optional[int] = typer.Argument(None, min=1, max=12, help="月份，默认本月"),
) -> None:
    """显示月历网格。"""
    almanac = _get_almanac(ctx)
    navigator = almanac.navigator
    if year is not None or month is not None:
        navigator.select(
            year if year is not None else navigator.year,
            month if month is not None else navigator.month,
        )

    table = Table(
        title=f"{navigator.year}年{navigator.month}月",
        show_lines=True,
    )
    for index, header in enumerate(WEEKDAY_HEADERS):
        style = "magenta" if index in (0, 6) else None
        table.add_column(header, justify="center", header_style=style, min_width=6)

    for row in grid_rows(almanac.month_facts()):
        table.add_row(*(_cell_text(f, almanac.classifier) for f in row))
    console.print(table)


@app.command()
def data(ctx: typer.Context) -> None:
    """列出已加载的放假安排。"""
    almanac = _get_almanac(ctx)
    classifier = almanac.classifier
    console.print(f"[bold]数据文件:[/bold] {almanac.config.holiday_data_path}")

    if not classifier.years:
        console.print("[yellow]⚠️ 没有可用的放假安排，仅按固定节日判定[/yellow]")
        return

    table = Table(title="放假安排")
    table.add_column("年份", style="cyan")
    table.add_column("假日", justify="right")
    table.add_column("调休上班", justify="right")
    for year in classifier.years:
        days = classifier.overrides[year].values()
        holidays = sum(1 for t in days if t is DayType.HOLIDAY)
        workdays = sum(1 for t in days if t is DayType.WORKDAY)
        table.add_row(str(year), str(holidays), str(workdays))
    console.print(table)


if __name__ == "__main__":
    app()
