#!/usr/bin/env python3
"""Load rate cards and timesheet entries from JSON, and fill entries from call sheets."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from models import TIME_FIELDS, CallSheet, DayType, EntryStatus, RateCard, TimesheetEntry
from utils import BASE_CONTRACTS, lunch_minutes_for, parse_time

logger = logging.getLogger(__name__)

# Call sheets assume a standard hour's lunch.
CALL_SHEET_LUNCH_MINUTES = 60

RATE_CARD_DECIMALS = (
    "daily_rate",
    "pre_call_multiplier",
    "ot_multiplier",
    "late_night_multiplier",
    "sixth_day_multiplier",
    "seventh_day_multiplier",
    "kit_rental",
)

# Keys as written by the mobile app, mapped to our field names.
KEY_ALIASES = {
    "dailyRate": "daily_rate",
    "baseContractHours": "base_contract_hours",
    "baseDayHours": "base_contract_hours",
    "baseContract": "base_contract",
    "dayType": "day_type",
    "preCallMultiplier": "pre_call_multiplier",
    "otMultiplier": "ot_multiplier",
    "lateNightMultiplier": "late_night_multiplier",
    "sixthDayMultiplier": "sixth_day_multiplier",
    "seventhDayMultiplier": "seventh_day_multiplier",
    "kitRental": "kit_rental",
    "preCall": "pre_call",
    "unitCall": "unit_call",
    "lunchStart": "lunch_start",
    "outOfChair": "out_of_chair",
    "wrapOut": "wrap_out",
    "lunchTaken": "lunch_taken_minutes",
    "lunchTakenMinutes": "lunch_taken_minutes",
    "isSixthDay": "is_sixth_day",
    "isSeventhDay": "is_seventh_day",
    "productionDay": "production_day",
    "autoFilledFrom": "auto_filled_from",
}


def get_timesheet_path() -> Path:
    """Get timesheet file path from environment variable or default location."""
    if env_path := os.environ.get("TIMESHEET_FILE"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "timesheet.json"


def _normalise_keys(data: dict) -> dict:
    return {KEY_ALIASES.get(key, key): value for key, value in data.items()}


def parse_decimal(val, field_name: str) -> Decimal:
    try:
        return Decimal(str(val))
    except InvalidOperation:
        raise ValueError(f"Invalid number for {field_name}: {val!r}")


def parse_date(val: str) -> date:
    try:
        return date.fromisoformat(str(val)[:10])
    except ValueError:
        raise ValueError(f"Invalid date: {val!r}. Expected YYYY-MM-DD")


def rate_card_from_dict(data: dict) -> RateCard:
    """Build a RateCard, raising ValueError on unusable configuration."""
    data = _normalise_keys(data)
    rate_card = RateCard()

    for name in RATE_CARD_DECIMALS:
        if data.get(name) is not None:
            setattr(rate_card, name, parse_decimal(data[name], name))

    if "base_contract" in data:
        rate_card.base_contract = data["base_contract"]
    elif "base_contract_hours" in data:
        hours = int(data["base_contract_hours"])
        if f"{hours}+1" not in BASE_CONTRACTS:
            raise ValueError(f"Unsupported base contract hours: {hours}")
        rate_card.base_contract_hours = hours

    if "day_type" in data:
        rate_card.day_type = DayType.parse(data["day_type"])
    if "currency" in data:
        rate_card.currency = data["currency"]

    return rate_card


def entry_from_dict(data: dict, default_day_type: DayType = DayType.SWD) -> TimesheetEntry:
    """Build an entry; entries without a day type take the rate card's."""
    data = _normalise_keys(data)
    if not data.get("date"):
        raise ValueError(f"Entry has no date: {data!r}")
    entry_date = parse_date(data["date"])
    day_type = DayType.parse(data.get("day_type") or default_day_type)

    times = {}
    for name in TIME_FIELDS:
        raw = data.get(name)
        times[name] = parse_time(raw)
        if raw and times[name] is None:
            logger.warning("%s: ignoring malformed %s %r", entry_date, name, raw)

    lunch = data.get("lunch_taken_minutes")
    entry = TimesheetEntry(
        date=entry_date,
        day_type=day_type,
        lunch_taken_minutes=lunch_minutes_for(day_type) if lunch is None else max(0, int(lunch)),
        notes=data.get("notes") or "",
        status=EntryStatus(data.get("status") or EntryStatus.DRAFT.value),
        production_day=data.get("production_day"),
        auto_filled_from=data.get("auto_filled_from"),
        **times,
    )
    entry.set_sixth_day(bool(data.get("is_sixth_day")))
    if data.get("is_seventh_day"):
        entry.set_seventh_day(True)
    return entry


def load_timesheet(json_path: Path | None = None) -> tuple[RateCard, dict[date, TimesheetEntry]]:
    """Load a rate card and entries (keyed by date) from a timesheet JSON file."""
    json_path = json_path or get_timesheet_path()
    try:
        with open(json_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"{json_path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"{json_path} must hold a JSON object, not {type(data).__name__}")

    rate_card = rate_card_from_dict(data.get("rate_card") or data.get("rateCard") or {})

    entries = {}
    raw_entries = data.get("entries", [])
    if isinstance(raw_entries, dict):
        raw_entries = list(raw_entries.values())
    for raw in raw_entries:
        entry = entry_from_dict(raw, default_day_type=rate_card.day_type)
        if entry.date in entries:
            logger.warning("Duplicate entry for %s, keeping the later one", entry.date)
        entries[entry.date] = entry

    logger.info("Loaded %d entries from %s", len(entries), json_path)
    return rate_card, entries


def autofill_from_call_sheet(entry: TimesheetEntry, call_sheet: CallSheet) -> TimesheetEntry:
    """Return a copy of entry with call, lunch and wrap times taken from a call sheet."""
    return replace(
        entry,
        unit_call=call_sheet.unit_call or entry.unit_call,
        lunch_start=call_sheet.lunch_estimate or entry.lunch_start,
        wrap_out=call_sheet.wrap_estimate or entry.wrap_out,
        lunch_taken_minutes=CALL_SHEET_LUNCH_MINUTES,
        production_day=call_sheet.production_day,
        auto_filled_from=call_sheet.id,
    )
