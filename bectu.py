"""BECTU hours and pay calculations.

A day is priced in a fixed order, each step working from what the previous
steps already counted:

    pre-call -> base/overtime split -> late night -> broken lunch
    -> broken turnaround -> pay -> 6th/7th day multiplier -> kit rental

Nothing in here raises. Incomplete or out-of-order clock times give a zeroed
calculation, and rule breaches come back as flags on the result.
"""

from __future__ import annotations

import logging
from datetime import date, time, timedelta
from decimal import Decimal

from models import SUMMED_FIELDS, RateCard, TimesheetCalculation, TimesheetEntry, WeekSummary
from utils import (
    LATE_NIGHT_START,
    LUNCH_DEADLINE_HOURS,
    MINIMUM_TURNAROUND_HOURS,
    get_week_dates,
    parse_time,
    time_diff_hours,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
CENT = Decimal("0.01")

# Broken lunch and broken turnaround are each a flat hour at the OT rate.
BREACH_PENALTY_HOURS = Decimal("1.0")


def _dec(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _q(value: Decimal) -> Decimal:
    return value.quantize(CENT)


def _day_multiplier(entry: TimesheetEntry, rate_card: RateCard) -> Decimal:
    # Seventh wins if both flags somehow got set.
    if entry.is_seventh_day:
        return _dec(rate_card.seventh_day_multiplier)
    if entry.is_sixth_day:
        return _dec(rate_card.sixth_day_multiplier)
    return ONE


def is_broken_lunch(entry: TimesheetEntry) -> bool:
    """Lunch taken but started more than six hours after unit call."""
    if entry.lunch_taken_minutes <= 0 or not entry.lunch_start or not entry.unit_call:
        return False
    return time_diff_hours(entry.unit_call, entry.lunch_start) > LUNCH_DEADLINE_HOURS


def turnaround_hours(previous_wrap_out: time | None, call: time | None) -> Decimal | None:
    """Rest between yesterday's wrap and today's call, or None if unknown."""
    if previous_wrap_out is None or call is None:
        return None
    hours = time_diff_hours(previous_wrap_out, call)
    if hours < 0:
        hours += 24
    return hours


def calculate_day(
    entry: TimesheetEntry,
    rate_card: RateCard,
    previous_wrap_out: time | str | None = None,
) -> TimesheetCalculation:
    """Price one day's clock times against a rate card.

    previous_wrap_out is the wrap time of the chronologically preceding day,
    used only for the turnaround check.
    """
    if entry.is_empty:
        return TimesheetCalculation()

    unit_call = entry.unit_call
    wrap_out = entry.wrap_out
    pre_call = entry.pre_call
    if pre_call and pre_call > unit_call:
        logger.debug("%s: pre-call %s after unit call %s, ignoring it", entry.date, pre_call, unit_call)
        pre_call = None
    start = pre_call or unit_call

    raw_hours = time_diff_hours(start, wrap_out)
    if raw_hours < 0:
        logger.debug("%s: wrap %s before start %s, zeroing day", entry.date, wrap_out, start)
        return TimesheetCalculation()

    lunch_hours = Decimal(max(0, entry.lunch_taken_minutes)) / 60
    worked_hours = max(ZERO, raw_hours - lunch_hours)

    pre_call_hours = time_diff_hours(pre_call, unit_call) if pre_call else ZERO

    contract_hours = Decimal(rate_card.base_contract_hours)
    remaining = worked_hours - pre_call_hours
    base_hours = max(ZERO, min(remaining, contract_hours))
    ot_hours = max(ZERO, remaining - contract_hours)

    late_night_hours = max(ZERO, time_diff_hours(max(start, LATE_NIGHT_START), wrap_out))
    late_night_hours = min(late_night_hours, ot_hours)

    has_broken_lunch = is_broken_lunch(entry)
    broken_lunch_hours = BREACH_PENALTY_HOURS if has_broken_lunch else ZERO

    turnaround = turnaround_hours(parse_time(previous_wrap_out), start)
    has_broken_turnaround = turnaround is not None and turnaround < MINIMUM_TURNAROUND_HOURS
    broken_turnaround_hours = BREACH_PENALTY_HOURS if has_broken_turnaround else ZERO

    daily_rate = _dec(rate_card.daily_rate)
    hourly_rate = daily_rate / contract_hours if contract_hours else ZERO
    ot_multiplier = _dec(rate_card.ot_multiplier)

    # Late-night hours are re-rated overtime, so they come out of the OT pay line.
    base_pay = _q(daily_rate)
    pre_call_pay = _q(pre_call_hours * hourly_rate * _dec(rate_card.pre_call_multiplier))
    overtime_pay = _q(max(ZERO, ot_hours - late_night_hours) * hourly_rate * ot_multiplier)
    late_night_pay = _q(late_night_hours * hourly_rate * _dec(rate_card.late_night_multiplier))
    broken_lunch_pay = _q(broken_lunch_hours * hourly_rate * ot_multiplier)
    broken_turnaround_pay = _q(broken_turnaround_hours * hourly_rate * ot_multiplier)
    subtotal = (
        base_pay + pre_call_pay + overtime_pay + late_night_pay
        + broken_lunch_pay + broken_turnaround_pay
    )

    day_multiplier = _day_multiplier(entry, rate_card)
    sixth_seventh_bonus = _q(subtotal * (day_multiplier - 1))
    kit_rental = _q(_dec(rate_card.kit_rental))

    pre_call_hours = _q(pre_call_hours)
    base_hours = _q(base_hours)
    ot_hours = _q(ot_hours)
    late_night_hours = _q(late_night_hours)

    return TimesheetCalculation(
        raw_hours=_q(raw_hours),
        worked_hours=_q(worked_hours),
        pre_call_hours=pre_call_hours,
        base_hours=base_hours,
        ot_hours=ot_hours,
        late_night_hours=late_night_hours,
        broken_lunch_hours=_q(broken_lunch_hours),
        broken_turnaround_hours=_q(broken_turnaround_hours),
        total_hours=pre_call_hours + base_hours + ot_hours,
        hourly_rate=_q(hourly_rate),
        base_pay=base_pay,
        pre_call_pay=pre_call_pay,
        overtime_pay=overtime_pay,
        late_night_pay=late_night_pay,
        broken_lunch_pay=broken_lunch_pay,
        broken_turnaround_pay=broken_turnaround_pay,
        subtotal=subtotal,
        day_multiplier=day_multiplier,
        sixth_seventh_bonus=sixth_seventh_bonus,
        kit_rental=kit_rental,
        total_earnings=subtotal + sixth_seventh_bonus + kit_rental,
        has_overtime=ot_hours > 0,
        has_late_night=late_night_hours > 0,
        has_broken_lunch=has_broken_lunch,
        has_broken_turnaround=has_broken_turnaround,
    )


def summarize_week(
    week_start: date | str,
    entries_by_date: dict[date | str, TimesheetEntry],
    rate_card: RateCard,
) -> WeekSummary:
    """Sum the seven days starting at week_start into a WeekSummary.

    Dates (week_start and the keys of entries_by_date) may be date objects
    or ISO strings. Turnaround for the first day is checked against the day before
    week_start, so pass in the previous week's entries too if you have them.
    """
    if isinstance(week_start, str):
        week_start = date.fromisoformat(week_start)
    entries_by_date = {
        date.fromisoformat(d) if isinstance(d, str) else d: entry
        for d, entry in entries_by_date.items()
    }

    totals = {name: ZERO for name in SUMMED_FIELDS}
    sixth_day_hours = ZERO
    seventh_day_hours = ZERO
    entries = []
    days = []

    for d in get_week_dates(week_start):
        entry = entries_by_date.get(d)
        if entry is None:
            calc = TimesheetCalculation()
        else:
            previous = entries_by_date.get(d - timedelta(days=1))
            calc = calculate_day(entry, rate_card, previous.wrap_out if previous else None)
            if not entry.is_empty:
                entries.append(entry)
            if entry.is_seventh_day:
                seventh_day_hours += calc.total_hours
            elif entry.is_sixth_day:
                sixth_day_hours += calc.total_hours

        for name in SUMMED_FIELDS:
            totals[name] += getattr(calc, name)
        days.append((d, calc))

    logger.debug("Week of %s: %d worked days, %s total", week_start, len(entries), totals["total_earnings"])

    return WeekSummary(
        start_date=week_start,
        end_date=week_start + timedelta(days=6),
        sixth_day_hours=sixth_day_hours,
        seventh_day_hours=seventh_day_hours,
        entries=entries,
        days=days,
        **totals,
    )
