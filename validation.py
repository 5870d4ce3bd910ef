"""Data-quality warnings for timesheet entries and rate cards.

These never raise; the UI decides how loudly to show them.
"""

from __future__ import annotations

from decimal import Decimal

from models import RateCard, TimesheetCalculation, TimesheetEntry
from utils import BASE_CONTRACTS, format_time, lunch_minutes_for

MULTIPLIER_FIELDS = (
    ("pre_call_multiplier", "Pre-call"),
    ("ot_multiplier", "Overtime"),
    ("late_night_multiplier", "Late night"),
    ("sixth_day_multiplier", "6th day"),
    ("seventh_day_multiplier", "7th day"),
)


def entry_warnings(entry: TimesheetEntry, calculation: TimesheetCalculation) -> list[str]:
    """Warnings for a single day, in the order a reviewer would read them."""
    warnings = []

    if entry.is_sixth_day and entry.is_seventh_day:
        warnings.append("Marked as both 6th and 7th day; 7th day rate used")

    if entry.pre_call and entry.unit_call and entry.pre_call > entry.unit_call:
        warnings.append(
            f"Pre-call {format_time(entry.pre_call)} is after unit call {format_time(entry.unit_call)}"
        )
    start = entry.effective_start
    if start and entry.wrap_out and entry.wrap_out < start:
        warnings.append(f"Wrap {format_time(entry.wrap_out)} is before call {format_time(start)}")

    if entry.lunch_taken_minutes != lunch_minutes_for(entry.day_type):
        warnings.append(
            f"Lunch of {entry.lunch_taken_minutes} min differs from the "
            f"{lunch_minutes_for(entry.day_type)} min {entry.day_type.value} default"
        )

    if calculation.has_overtime and not entry.notes.strip():
        warnings.append("Overtime recorded: add a note explaining it")
    if calculation.has_broken_lunch:
        warnings.append("Broken lunch: lunch started more than 6 hours after unit call")
    if calculation.has_broken_turnaround:
        warnings.append("Broken turnaround: less than 11 hours since previous wrap")

    return warnings


def rate_card_warnings(rate_card: RateCard) -> list[str]:
    warnings = []
    if Decimal(str(rate_card.daily_rate)) <= 0:
        warnings.append("Daily rate is not set")
    if rate_card.base_contract not in BASE_CONTRACTS:
        warnings.append(f"Unusual base contract {rate_card.base_contract}")
    for attr, label in MULTIPLIER_FIELDS:
        if Decimal(str(getattr(rate_card, attr))) < 1:
            warnings.append(f"{label} multiplier is below 1.0")
    return warnings
