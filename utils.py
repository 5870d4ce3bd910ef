"""Utility functions for timesheet calculations."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, time, timedelta
from decimal import Decimal

logger = logging.getLogger(__name__)


DAY_TYPE_LABELS = {
    "SWD": "Standard Working Day",
    "SCWD": "Semi-Continuous Working Day",
    "CWD": "Continuous Working Day",
}

# Unpaid lunch per day type, in minutes.
DAY_TYPE_LUNCH_MINUTES = {
    "SWD": 60,
    "SCWD": 30,
    "CWD": 0,
}

BASE_CONTRACTS = {
    "10+1": 10,
    "11+1": 11,
}

LATE_NIGHT_START = time(23, 0)
LUNCH_DEADLINE_HOURS = Decimal("6")
MINIMUM_TURNAROUND_HOURS = Decimal("11")


def lunch_minutes_for(day_type) -> int:
    """Default unpaid lunch for a day type. Unknown types get the SWD hour."""
    key = str(getattr(day_type, "value", day_type)).upper()
    return DAY_TYPE_LUNCH_MINUTES.get(key, DAY_TYPE_LUNCH_MINUTES["SWD"])


def parse_time(val: str | time | None) -> time | None:
    """Parse "HH:MM" into a time. Empty or malformed values give None."""
    if isinstance(val, time):
        return val
    if not val:
        return None
    try:
        hours, minutes = str(val).strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except (ValueError, TypeError):
        logger.debug("Ignoring malformed clock time %r", val)
        return None


def format_time(t: time | None) -> str:
    if not t:
        return ""
    return t.strftime("%H:%M")


def time_to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def time_diff_hours(start: time | None, end: time | None) -> Decimal:
    """Hours from start to end on the same calendar day (negative if end is earlier)."""
    if start is None or end is None:
        return Decimal("0")
    return Decimal(time_to_minutes(end) - time_to_minutes(start)) / Decimal(60)


def get_week_start(d: date) -> date:
    """Get the Monday that starts the production week containing date d."""
    return d - timedelta(days=d.weekday())


def get_week_dates(week_start: date) -> list[date]:
    return [week_start + timedelta(days=i) for i in range(7)]


def get_weeks_in_month(year: int, month: int) -> list[tuple[date, date]]:
    """Get list of (week_start, week_end) tuples that overlap with the month."""
    first_day = date(year, month, 1)
    last_day = date(year, month, monthrange(year, month)[1])

    weeks = []
    week_start = get_week_start(first_day)

    while week_start <= last_day:
        week_end = week_start + timedelta(days=6)
        weeks.append((week_start, week_end))
        week_start = week_start + timedelta(days=7)

    return weeks


def get_month_entries(entries_by_date: dict, year: int, month: int) -> list:
    """Get all entries for a calendar month, in date order."""
    start = date(year, month, 1)
    end = date(year, month, monthrange(year, month)[1])
    return [entries_by_date[d] for d in sorted(entries_by_date) if start <= d <= end]
