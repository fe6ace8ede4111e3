"""
Pure domain layer.

This module contains pure data transfer objects and domain models
with NO dependencies on:
- Files or spreadsheets
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from payroll_kernel.domain.dtos import ValidationError, ValidationResult
from payroll_kernel.domain.models import (
    AttendanceRecord,
    ClockValue,
    DailyResult,
    DayStatus,
    DeductionBreakdown,
    EmployeeProfile,
    MONTH_NAMES,
    PayPeriod,
    PayrollResult,
    WeeklyTotals,
)
from payroll_kernel.domain.policy import (
    DEFAULT_POLICY,
    OVERTIME_PREMIUM,
    FiscalWindow,
    OvertimeMode,
    OvertimePolicy,
    PayrollPolicy,
    WorkSchedule,
)
from payroll_kernel.domain.values import CURRENCY_CODE, round_money, to_decimal

__all__ = [
    "AttendanceRecord",
    "ClockValue",
    "CURRENCY_CODE",
    "DailyResult",
    "DayStatus",
    "DeductionBreakdown",
    "DEFAULT_POLICY",
    "EmployeeProfile",
    "MONTH_NAMES",
    "FiscalWindow",
    "OVERTIME_PREMIUM",
    "OvertimeMode",
    "OvertimePolicy",
    "PayPeriod",
    "PayrollPolicy",
    "PayrollResult",
    "ValidationError",
    "ValidationResult",
    "WeeklyTotals",
    "WorkSchedule",
    "round_money",
    "to_decimal",
]
