"""
Payroll Domain Models (``payroll_kernel.domain.models``).

Responsibility
--------------
Frozen dataclass value objects for the nouns of the attendance-to-pay
computation: pay periods, attendance rows, employee profiles, daily and
weekly results, deductions and the final payroll result.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A pay period never starts after it ends.
* An employee profile always has a strictly positive hourly rate.

Failure modes
-------------
* ``ValueError`` for an inverted pay period.
* ``InvalidHourlyRateError`` for a non-positive hourly rate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.values import ZERO, to_decimal
from payroll_kernel.exceptions import InvalidHourlyRateError

ClockValue = time | str | None

MONTH_NAMES: tuple[str, ...] = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)


@dataclass(frozen=True)
class PayPeriod:
    """A weekly span used as the unit of lateness and overtime aggregation."""

    sequence: int
    iso_week: int
    start: date
    end: date  # inclusive

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Pay period start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def month_name(self) -> str:
        """Upper-case English name of the month the period starts in."""
        return MONTH_NAMES[self.start.month - 1]


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's log-in/log-out pair for one date, as read from the source."""

    employee_id: int
    work_date: date
    clock_in: ClockValue = None
    clock_out: ClockValue = None


@dataclass(frozen=True)
class EmployeeProfile:
    """Employee master data needed to price attendance."""

    employee_id: int
    first_name: str
    last_name: str
    birth_date: date | None
    hourly_rate: Decimal
    rice_subsidy: Decimal = ZERO
    phone_allowance: Decimal = ZERO
    clothing_allowance: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("hourly_rate", "rice_subsidy", "phone_allowance", "clothing_allowance"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))
        if self.hourly_rate <= 0:
            raise InvalidHourlyRateError(self.employee_id, self.hourly_rate)
        for name in ("rice_subsidy", "phone_allowance", "clothing_allowance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative for employee {self.employee_id}")

    @property
    def monthly_benefits(self) -> Decimal:
        """Sum of the fixed monthly allowances."""
        return self.rice_subsidy + self.phone_allowance + self.clothing_allowance

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"


class DayStatus(str, Enum):
    """How a single attendance row was treated."""

    COUNTED = "counted"
    MISSING_TIME = "missing_time"
    UNPARSEABLE_TIME = "unparseable_time"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DailyResult:
    """Minutes and overtime pay derived from one attendance row."""

    regular_minutes: int = 0
    late_minutes: int = 0
    overtime_minutes: int = 0
    overtime_pay: Decimal = ZERO
    status: DayStatus = DayStatus.COUNTED
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def skipped(cls, status: DayStatus, *warnings: str) -> DailyResult:
        """A zero-contribution result for a day that was not counted."""
        return cls(status=status, warnings=tuple(warnings))

    @property
    def is_counted(self) -> bool:
        return self.status is DayStatus.COUNTED


@dataclass(frozen=True)
class WeeklyTotals:
    """Aggregated attendance and pay for one pay period."""

    period: PayPeriod
    regular_minutes: int = 0
    late_minutes: int = 0
    overtime_minutes: int = 0
    regular_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    days_counted: int = 0
    days_skipped: int = 0

    @property
    def weekly_salary(self) -> Decimal:
        return self.regular_pay + self.overtime_pay


@dataclass(frozen=True)
class DeductionBreakdown:
    """Statutory contributions and tax derived from a gross monthly salary."""

    social_insurance: Decimal = ZERO
    health_insurance_total: Decimal = ZERO
    health_insurance_employee_share: Decimal = ZERO
    housing_fund: Decimal = ZERO
    taxable_income: Decimal = ZERO
    withholding_tax: Decimal = ZERO

    @property
    def contributions(self) -> Decimal:
        """Pre-tax statutory contributions (employee side)."""
        return self.social_insurance + self.health_insurance_employee_share + self.housing_fund

    @property
    def total_deductions(self) -> Decimal:
        return self.contributions + self.withholding_tax


@dataclass(frozen=True)
class PayrollResult:
    """Monthly pay statement figures for one employee."""

    employee_id: int
    month: str
    gross_salary: Decimal
    deductions: DeductionBreakdown
    monthly_benefits: Decimal

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total_deductions

    @property
    def net_pay(self) -> Decimal:
        return self.gross_salary - self.deductions.total_deductions + self.monthly_benefits
