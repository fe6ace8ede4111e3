"""Outcome types returned by ``PayrollService.compute``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from payroll_kernel.domain.dtos import ValidationError
from payroll_kernel.domain.models import EmployeeProfile, PayrollResult, WeeklyTotals


class OutcomeStatus(str, Enum):
    """Terminal status of one payroll request."""

    SUCCESS = "success"
    EMPLOYEE_NOT_FOUND = "employee_not_found"
    INVALID_MONTH = "invalid_month"
    MONTH_NOT_COMPUTABLE = "month_not_computable"
    POLICY_ERROR = "policy_error"


@dataclass(frozen=True)
class PayrollOutcome:
    """
    Tagged result of a payroll request.

    Contract:
        ``result`` is present only for SUCCESS. ``errors`` is non-empty for
        every other status. ``profile`` and ``weeks`` are filled in as far
        as the request got before it stopped.
    """

    status: OutcomeStatus
    month: str
    profile: EmployeeProfile | None = None
    weeks: tuple[WeeklyTotals, ...] = field(default_factory=tuple)
    result: PayrollResult | None = None
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(
        cls,
        *,
        month: str,
        profile: EmployeeProfile,
        weeks: tuple[WeeklyTotals, ...],
        result: PayrollResult,
    ) -> PayrollOutcome:
        return cls(
            status=OutcomeStatus.SUCCESS,
            month=month,
            profile=profile,
            weeks=weeks,
            result=result,
        )

    @classmethod
    def failure(
        cls,
        status: OutcomeStatus,
        *errors: ValidationError,
        month: str,
        profile: EmployeeProfile | None = None,
        weeks: tuple[WeeklyTotals, ...] = (),
    ) -> PayrollOutcome:
        if status is OutcomeStatus.SUCCESS:
            raise ValueError("failure() requires a non-success status")
        return cls(
            status=status,
            month=month,
            profile=profile,
            weeks=tuple(weeks),
            errors=tuple(errors),
        )

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
