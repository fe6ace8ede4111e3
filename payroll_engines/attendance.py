"""
Daily Attendance Evaluator (``payroll_engines.attendance``).

Responsibility
--------------
Classify one employee's log-in/log-out pair for one date into regular
minutes, late minutes and overtime pay against the fixed work schedule.

Architecture position
---------------------
**Engines layer** -- pure functional core. ZERO I/O, ZERO clock reads.
Called by the weekly aggregator once per matching attendance row.

Invariants enforced
-------------------
* Minutes and pay are never negative.
* Lunch (12:00-13:00 by default) is never paid.
* Overtime is only paid when the employee was on time AND left after the
  scheduled end.

Failure modes
-------------
* Row-level problems never raise. Missing or unparseable times and a
  log-out before log-in yield a zero-contribution ``DailyResult`` with a
  non-COUNTED status and a logged warning.
* Implausible but usable punches (log-in after noon, log-out before the
  scheduled start) are counted and flagged as warnings.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

from payroll_kernel.domain.models import ClockValue, DailyResult, DayStatus
from payroll_kernel.domain.policy import DEFAULT_POLICY, PayrollPolicy
from payroll_kernel.exceptions import ClockOutBeforeClockInError, InvalidClockTimeError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.attendance")

CLOCK_FORMAT = "%H:%M"


def is_missing(value: ClockValue) -> bool:
    """True for an absent punch: None or blank text."""
    return value is None or (isinstance(value, str) and not value.strip())


def parse_clock_time(value: ClockValue) -> time:
    """Read a punch as a minute-resolution ``time``.

    Accepts ``time`` and ``datetime`` values (spreadsheet cells) and
    ``"HH:MM"`` text. Seconds are dropped.

    Raises:
        InvalidClockTimeError: for blank, malformed or non-time values.
    """
    if isinstance(value, datetime):
        return value.time().replace(second=0, microsecond=0)
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.strptime(value.strip(), CLOCK_FORMAT).time()
        except ValueError as e:
            raise InvalidClockTimeError(value) from e
    raise InvalidClockTimeError(value)


def minutes_between(start: time, end: time) -> int:
    """Signed whole minutes from ``start`` to ``end`` on the same day."""
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def evaluate_day(
    clock_in: ClockValue,
    clock_out: ClockValue,
    hourly_rate: Decimal,
    *,
    policy: PayrollPolicy = DEFAULT_POLICY,
    employee_id: int | None = None,
    work_date: date | None = None,
) -> DailyResult:
    """Evaluate one attendance row.

    Args:
        clock_in: Log-in punch (``time``, ``"HH:MM"`` or None).
        clock_out: Log-out punch.
        hourly_rate: Base pay per hour, used for overtime pay.
        policy: Schedule and overtime constants.
        employee_id: For log context only.
        work_date: For log context only.

    Returns:
        DailyResult; non-COUNTED statuses carry zero minutes and zero pay.
    """
    log_fields = {"employee_id": employee_id, "work_date": work_date}

    if is_missing(clock_in) or is_missing(clock_out):
        logger.info(
            "attendance_time_missing",
            extra={**log_fields, "clock_in": clock_in, "clock_out": clock_out},
        )
        return DailyResult.skipped(
            DayStatus.MISSING_TIME,
            f"Missing time data for employee {employee_id} on {work_date}",
        )

    try:
        log_in = parse_clock_time(clock_in)
        log_out = parse_clock_time(clock_out)
    except InvalidClockTimeError as e:
        logger.warning(
            "attendance_time_unparseable",
            extra={**log_fields, "raw_value": e.raw_value, "error_code": e.code},
        )
        return DailyResult.skipped(
            DayStatus.UNPARSEABLE_TIME,
            f"Invalid time data for employee {employee_id} on {work_date}: {e}",
        )

    if log_out < log_in:
        err = ClockOutBeforeClockInError(log_in.strftime(CLOCK_FORMAT), log_out.strftime(CLOCK_FORMAT))
        logger.warning(
            "attendance_clock_out_before_clock_in",
            extra={**log_fields, "clock_in": err.clock_in, "clock_out": err.clock_out, "error_code": err.code},
        )
        return DailyResult.skipped(
            DayStatus.REJECTED,
            f"Invalid time range for employee {employee_id} on {work_date}: {err}",
        )

    schedule = policy.schedule
    warnings: list[str] = []
    if log_in > schedule.late_login_warning:
        logger.warning("attendance_suspicious_login", extra={**log_fields, "clock_in": log_in})
        warnings.append(f"Suspicious login time for employee {employee_id} on {work_date}: {log_in:%H:%M}")
    if log_out < schedule.early_logout_warning:
        logger.warning("attendance_suspicious_logout", extra={**log_fields, "clock_out": log_out})
        warnings.append(f"Suspicious logout time for employee {employee_id} on {work_date}: {log_out:%H:%M}")

    late_minutes = max(0, minutes_between(schedule.start, log_in))

    work_start = max(log_in, schedule.start)
    morning = max(0, minutes_between(work_start, schedule.lunch_start))
    afternoon = max(0, minutes_between(schedule.lunch_end, min(log_out, schedule.end)))

    overtime_minutes = 0
    overtime_pay = Decimal("0")
    if log_in <= schedule.start and log_out > schedule.end:
        overtime_minutes = minutes_between(schedule.end, log_out)
        overtime_pay = policy.overtime.pay_for(overtime_minutes, hourly_rate)

    return DailyResult(
        regular_minutes=morning + afternoon,
        late_minutes=late_minutes,
        overtime_minutes=overtime_minutes,
        overtime_pay=overtime_pay,
        status=DayStatus.COUNTED,
        warnings=tuple(warnings),
    )
