from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

from utils import BASE_CONTRACTS, lunch_minutes_for, parse_time


class DayType(str, Enum):
    SWD = "SWD"
    SCWD = "SCWD"
    CWD = "CWD"

    @classmethod
    def parse(cls, value: str | None) -> DayType:
        """Parse a day type code, falling back to SWD for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.SWD


class EntryStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"


@dataclass
class RateCard:
    daily_rate: Decimal = Decimal("0")
    base_contract_hours: int = 11
    day_type: DayType = DayType.SWD
    pre_call_multiplier: Decimal = Decimal("1.5")
    ot_multiplier: Decimal = Decimal("1.5")
    late_night_multiplier: Decimal = Decimal("2.0")
    sixth_day_multiplier: Decimal = Decimal("1.5")
    seventh_day_multiplier: Decimal = Decimal("2.0")
    kit_rental: Decimal = Decimal("0")
    currency: str = "GBP"

    @property
    def base_contract(self) -> str:
        """BECTU contract label, e.g. "11+1"."""
        return f"{self.base_contract_hours}+1"

    @base_contract.setter
    def base_contract(self, value: str) -> None:
        if value not in BASE_CONTRACTS:
            raise ValueError(f"Unknown base contract: {value!r}")
        self.base_contract_hours = BASE_CONTRACTS[value]

    @property
    def hourly_rate(self) -> Decimal:
        if not self.base_contract_hours:
            return Decimal("0")
        return Decimal(self.daily_rate) / Decimal(self.base_contract_hours)

    def lunch_minutes_for(self, day_type: DayType | str | None) -> int:
        return lunch_minutes_for(day_type)


TIME_FIELDS = ("pre_call", "unit_call", "lunch_start", "out_of_chair", "wrap_out")


@dataclass
class TimesheetEntry:
    date: date
    day_type: DayType = DayType.SWD
    pre_call: time | None = None
    unit_call: time | None = None
    lunch_start: time | None = None
    out_of_chair: time | None = None
    wrap_out: time | None = None
    lunch_taken_minutes: int = 60
    is_sixth_day: bool = False
    is_seventh_day: bool = False
    notes: str = ""
    status: EntryStatus = EntryStatus.DRAFT
    production_day: int | None = None
    auto_filled_from: str | None = None

    def __post_init__(self):
        # Clock times may arrive as "HH:MM"; malformed ones become empty.
        for name in TIME_FIELDS:
            setattr(self, name, parse_time(getattr(self, name)))
        self.day_type = DayType.parse(self.day_type)

    @property
    def is_empty(self) -> bool:
        """True until both unit call and wrap have been recorded."""
        return not self.unit_call or not self.wrap_out

    @property
    def effective_start(self) -> time | None:
        return self.pre_call or self.unit_call

    def set_day_type(self, day_type: DayType | str) -> None:
        """Change the day type and re-derive the unpaid lunch for it."""
        self.day_type = DayType.parse(day_type)
        self.lunch_taken_minutes = lunch_minutes_for(self.day_type)

    def set_sixth_day(self, value: bool) -> None:
        self.is_sixth_day = value
        if value:
            self.is_seventh_day = False

    def set_seventh_day(self, value: bool) -> None:
        self.is_seventh_day = value
        if value:
            self.is_sixth_day = False


@dataclass
class CallSheet:
    """The parts of a parsed call sheet that feed a timesheet entry."""
    id: str
    date: date
    production_day: int
    unit_call: time | None = None
    lunch_estimate: time | None = None
    wrap_estimate: time | None = None

    def __post_init__(self):
        for name in ("unit_call", "lunch_estimate", "wrap_estimate"):
            setattr(self, name, parse_time(getattr(self, name)))


ZERO = Decimal("0")


@dataclass(frozen=True)
class TimesheetCalculation:
    raw_hours: Decimal = ZERO
    worked_hours: Decimal = ZERO
    pre_call_hours: Decimal = ZERO
    base_hours: Decimal = ZERO
    ot_hours: Decimal = ZERO
    late_night_hours: Decimal = ZERO
    broken_lunch_hours: Decimal = ZERO
    broken_turnaround_hours: Decimal = ZERO
    total_hours: Decimal = ZERO

    hourly_rate: Decimal = ZERO
    base_pay: Decimal = ZERO
    pre_call_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    late_night_pay: Decimal = ZERO
    broken_lunch_pay: Decimal = ZERO
    broken_turnaround_pay: Decimal = ZERO
    subtotal: Decimal = ZERO
    day_multiplier: Decimal = Decimal("1")
    sixth_seventh_bonus: Decimal = ZERO
    kit_rental: Decimal = ZERO
    total_earnings: Decimal = ZERO

    has_overtime: bool = False
    has_late_night: bool = False
    has_broken_lunch: bool = False
    has_broken_turnaround: bool = False


# Fields summed across a week; everything numeric on a calculation except rates.
SUMMED_FIELDS = (
    "pre_call_hours",
    "base_hours",
    "ot_hours",
    "late_night_hours",
    "broken_lunch_hours",
    "broken_turnaround_hours",
    "total_hours",
    "base_pay",
    "pre_call_pay",
    "overtime_pay",
    "late_night_pay",
    "broken_lunch_pay",
    "broken_turnaround_pay",
    "sixth_seventh_bonus",
    "kit_rental",
    "total_earnings",
)


@dataclass(frozen=True)
class WeekSummary:
    start_date: date
    end_date: date
    pre_call_hours: Decimal = ZERO
    base_hours: Decimal = ZERO
    ot_hours: Decimal = ZERO
    late_night_hours: Decimal = ZERO
    broken_lunch_hours: Decimal = ZERO
    broken_turnaround_hours: Decimal = ZERO
    sixth_day_hours: Decimal = ZERO
    seventh_day_hours: Decimal = ZERO
    total_hours: Decimal = ZERO

    base_pay: Decimal = ZERO
    pre_call_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    late_night_pay: Decimal = ZERO
    broken_lunch_pay: Decimal = ZERO
    broken_turnaround_pay: Decimal = ZERO
    sixth_seventh_bonus: Decimal = ZERO
    kit_rental: Decimal = ZERO
    total_earnings: Decimal = ZERO

    entries: list[TimesheetEntry] = field(default_factory=list)
    days: list[tuple[date, TimesheetCalculation]] = field(default_factory=list)
