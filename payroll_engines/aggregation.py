"""
Weekly Aggregator (``payroll_engines.aggregation``).

Responsibility
--------------
Fold an employee's daily evaluations into per-period ``WeeklyTotals`` and
sum the periods of a requested month into gross monthly salary.

Architecture position
---------------------
**Engines layer** -- pure functional core. Consumes already-read
attendance rows; never touches the source. Invokes
``payroll_engines.attendance.evaluate_day`` per matching row.

Invariants enforced
-------------------
* Only rows for the requested employee dated within [start, end] of the
  period contribute.
* Folds return new values; nothing is mutated, so the same inputs always
  give the same totals.
* Weekly regular pay = regular minutes x hourly rate / 60. Weekly overtime
  pay prices the summed overtime minutes the same way at the overtime
  factor. Both are rounded to centavos once per week, so row order never
  changes the result.
* No period yields negative pay.

Failure modes
-------------
* ``InvalidHourlyRateError`` for a non-positive hourly rate.
* Bad rows never raise; see ``payroll_engines.attendance``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal
from functools import reduce

from payroll_engines.attendance import evaluate_day
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.models import AttendanceRecord, DailyResult, PayPeriod, WeeklyTotals
from payroll_kernel.domain.policy import DEFAULT_POLICY, PayrollPolicy
from payroll_kernel.domain.values import MINUTES_PER_HOUR, ZERO, round_money
from payroll_kernel.exceptions import InvalidHourlyRateError
from payroll_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.aggregation")


@dataclass(frozen=True)
class _WeekAccumulator:
    regular_minutes: int = 0
    late_minutes: int = 0
    overtime_minutes: int = 0
    days_counted: int = 0
    days_skipped: int = 0

    def add(self, day: DailyResult) -> _WeekAccumulator:
        if not day.is_counted:
            return replace(self, days_skipped=self.days_skipped + 1)
        return _WeekAccumulator(
            regular_minutes=self.regular_minutes + day.regular_minutes,
            late_minutes=self.late_minutes + day.late_minutes,
            overtime_minutes=self.overtime_minutes + day.overtime_minutes,
            days_counted=self.days_counted + 1,
            days_skipped=self.days_skipped,
        )


@dataclass(frozen=True)
class MonthlyGross:
    """Per-period totals for a month and their summed weekly salary."""

    month: str
    weeks: tuple[WeeklyTotals, ...]

    @property
    def gross_salary(self) -> Decimal:
        return sum((w.weekly_salary for w in self.weeks), ZERO)

    @property
    def regular_minutes(self) -> int:
        return sum(w.regular_minutes for w in self.weeks)

    @property
    def late_minutes(self) -> int:
        return sum(w.late_minutes for w in self.weeks)

    @property
    def is_empty(self) -> bool:
        return not self.weeks


def _require_positive_rate(employee_id: int, hourly_rate: Decimal) -> None:
    if hourly_rate <= 0:
        raise InvalidHourlyRateError(employee_id, hourly_rate)


def records_in_period(
    employee_id: int,
    period: PayPeriod,
    records: Iterable[AttendanceRecord],
) -> tuple[AttendanceRecord, ...]:
    """Rows belonging to ``employee_id`` dated inside ``period``."""
    return tuple(
        r for r in records
        if r.employee_id == employee_id and period.contains(r.work_date)
    )


def compute_weekly_totals(
    employee_id: int,
    hourly_rate: Decimal,
    period: PayPeriod,
    records: Iterable[AttendanceRecord],
    policy: PayrollPolicy = DEFAULT_POLICY,
) -> WeeklyTotals:
    """Aggregate one pay period for one employee."""
    _require_positive_rate(employee_id, hourly_rate)

    days = (
        evaluate_day(
            r.clock_in,
            r.clock_out,
            hourly_rate,
            policy=policy,
            employee_id=employee_id,
            work_date=r.work_date,
        )
        for r in records_in_period(employee_id, period, records)
    )
    with LogContext.bind(period=f"{period.start}/{period.end}"):
        acc = reduce(_WeekAccumulator.add, days, _WeekAccumulator())

    regular_pay = round_money(Decimal(acc.regular_minutes) * hourly_rate / MINUTES_PER_HOUR)
    overtime_pay = round_money(policy.overtime.pay_for(acc.overtime_minutes, hourly_rate))
    totals = WeeklyTotals(
        period=period,
        regular_minutes=acc.regular_minutes,
        late_minutes=acc.late_minutes,
        overtime_minutes=acc.overtime_minutes,
        regular_pay=regular_pay,
        overtime_pay=overtime_pay,
        days_counted=acc.days_counted,
        days_skipped=acc.days_skipped,
    )
    logger.debug(
        "weekly_totals_computed",
        extra={
            "employee_id": employee_id,
            "period_sequence": period.sequence,
            "period_start": period.start,
            "period_end": period.end,
            "regular_minutes": totals.regular_minutes,
            "late_minutes": totals.late_minutes,
            "weekly_salary": totals.weekly_salary,
            "days_skipped": totals.days_skipped,
        },
    )
    return totals


@traced_engine(
    "monthly_gross",
    "1.0",
    fingerprint_fields=("employee_id", "hourly_rate", "month", "periods", "policy"),
)
def compute_monthly_gross(
    *,
    employee_id: int,
    hourly_rate: Decimal,
    month: str,
    periods: tuple[PayPeriod, ...],
    records: Iterable[AttendanceRecord],
    policy: PayrollPolicy = DEFAULT_POLICY,
) -> MonthlyGross:
    """Compute WeeklyTotals for every period of ``month`` and their sum.

    ``periods`` must already be filtered to the month; an empty tuple gives
    an empty ``MonthlyGross`` that callers report as "month not computable".
    """
    _require_positive_rate(employee_id, hourly_rate)
    rows = tuple(records)
    weeks = tuple(
        compute_weekly_totals(employee_id, hourly_rate, period, rows, policy)
        for period in periods
    )
    result = MonthlyGross(month=month, weeks=weeks)
    logger.info(
        "monthly_gross_computed",
        extra={
            "employee_id": employee_id,
            "month": month,
            "period_count": len(weeks),
            "gross_salary": result.gross_salary,
        },
    )
    return result
