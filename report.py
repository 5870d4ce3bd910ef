#!/usr/bin/env python3
"""Print a week's BECTU hours and pay breakdown."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from bectu import summarize_week
from import_data import load_timesheet
from models import RateCard, TimesheetEntry, WeekSummary
from utils import format_time, get_week_start
from validation import entry_warnings, rate_card_warnings

logger = logging.getLogger(__name__)


def _hours(value: Decimal) -> Text:
    # Zero columns are dimmed so the eye lands on what was actually worked.
    return Text(f"{float(value):g}", style="dim" if value == 0 else "")


def _money(value: Decimal, currency: str) -> Text:
    symbol = "£" if currency == "GBP" else f"{currency} "
    return Text(f"{symbol}{value:,.2f}", style="dim" if value == 0 else "")


def build_week_table(
    summary: WeekSummary,
    entries_by_date: dict[date, TimesheetEntry],
    rate_card: RateCard,
) -> Table:
    """One row per day of the week plus a TOTAL row."""
    table = Table(title=f"Week of {summary.start_date:%a %d %b %Y}")
    table.add_column("Day")
    table.add_column("Call")
    table.add_column("Wrap")
    table.add_column("Pre", justify="right")
    table.add_column("Base", justify="right")
    table.add_column("OT", justify="right")
    table.add_column("Late", justify="right")
    table.add_column("Total h", justify="right")
    table.add_column("Earnings", justify="right")
    table.add_column("Flags")

    for d, calc in summary.days:
        entry = entries_by_date.get(d)
        flags = Text()
        if calc.has_broken_lunch:
            flags.append("BL ", style="yellow")
        if calc.has_broken_turnaround:
            flags.append("BT ", style="magenta")
        if entry is not None and entry.is_seventh_day:
            flags.append("7th ", style="bold")
        elif entry is not None and entry.is_sixth_day:
            flags.append("6th ", style="bold")

        table.add_row(
            f"{d:%a %d}",
            format_time(entry.effective_start) if entry else "",
            format_time(entry.wrap_out) if entry else "",
            _hours(calc.pre_call_hours),
            _hours(calc.base_hours),
            _hours(calc.ot_hours),
            _hours(calc.late_night_hours),
            _hours(calc.total_hours),
            _money(calc.total_earnings, rate_card.currency),
            flags,
        )

    table.add_row(
        Text("TOTAL", style="bold"),
        "",
        "",
        _hours(summary.pre_call_hours),
        _hours(summary.base_hours),
        _hours(summary.ot_hours),
        _hours(summary.late_night_hours),
        _hours(summary.total_hours),
        _money(summary.total_earnings, rate_card.currency),
        "",
        end_section=True,
    )
    return table


def collect_warnings(summary: WeekSummary, rate_card: RateCard) -> list[str]:
    warnings = rate_card_warnings(rate_card)
    calcs = dict(summary.days)
    for entry in summary.entries:
        for warning in entry_warnings(entry, calcs[entry.date]):
            warnings.append(f"{entry.date:%a %d %b}: {warning}")
    return warnings


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("date", nargs="?", help="any date in the week to show (YYYY-MM-DD), default today")
    parser.add_argument("-f", "--file", type=Path, help="timesheet JSON file (default $TIMESHEET_FILE)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    console = console or Console()

    try:
        day = date.fromisoformat(args.date) if args.date else date.today()
        rate_card, entries = load_timesheet(args.file)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    summary = summarize_week(get_week_start(day), entries, rate_card)
    console.print(build_week_table(summary, entries, rate_card))
    for warning in collect_warnings(summary, rate_card):
        console.print(f"[yellow]![/yellow] {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
