"""Shared fixtures for tests."""

from __future__ import annotations

import json
from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pytest


@pytest.fixture
def rate_card():
    """An 11+1 rate card at £550 a day with the standard multipliers."""
    from models import RateCard

    return RateCard(daily_rate=Decimal("550"), base_contract_hours=11)


@pytest.fixture
def standard_day():
    """06:00 call, 18:00 wrap, an hour's lunch: exactly a contracted day."""
    from models import DayType, TimesheetEntry

    return TimesheetEntry(
        date=date(2026, 3, 2),
        day_type=DayType.SWD,
        unit_call=time(6, 0),
        lunch_start=time(12, 0),
        wrap_out=time(18, 0),
        lunch_taken_minutes=60,
    )


@pytest.fixture
def pre_call_day():
    """Pre-call at 05:00 and two hours of overtime."""
    from models import DayType, TimesheetEntry

    return TimesheetEntry(
        date=date(2026, 3, 3),
        day_type=DayType.SWD,
        pre_call=time(5, 0),
        unit_call=time(6, 0),
        wrap_out=time(20, 0),
        lunch_taken_minutes=60,
        notes="Extra scenes added",
    )


@pytest.fixture
def make_entry():
    """Factory for entries from "HH:MM" strings."""
    from models import DayType, TimesheetEntry
    from utils import parse_time

    def _make(d=date(2026, 3, 2), unit_call="", wrap_out="", pre_call="", lunch_start="",
              lunch=60, day_type=DayType.SWD, **kwargs):
        return TimesheetEntry(
            date=d,
            day_type=day_type,
            pre_call=parse_time(pre_call),
            unit_call=parse_time(unit_call),
            lunch_start=parse_time(lunch_start),
            wrap_out=parse_time(wrap_out),
            lunch_taken_minutes=lunch,
            **kwargs,
        )

    return _make


@pytest.fixture
def timesheet_file(tmp_path) -> Path:
    """A timesheet JSON file in the mobile app's camelCase layout."""
    data = {
        "rateCard": {
            "dailyRate": 550,
            "baseContract": "11+1",
            "otMultiplier": 1.5,
            "kitRental": 25,
        },
        "entries": [
            {
                "date": "2026-03-02",
                "dayType": "SWD",
                "unitCall": "06:00",
                "wrapOut": "18:00",
                "lunchTaken": 60,
            },
            {
                "date": "2026-03-03",
                "dayType": "SWD",
                "preCall": "05:00",
                "unitCall": "06:00",
                "wrapOut": "20:00",
                "lunchTaken": 60,
                "notes": "Overran on the night exterior",
            },
        ],
    }
    path = tmp_path / "timesheet.json"
    path.write_text(json.dumps(data))
    return path
