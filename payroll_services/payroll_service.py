"""
PayrollService -- orchestrates one attendance-to-pay request.

Responsibility:
    Resolve the employee, select the pay periods of the requested month,
    pull the matching attendance rows, and run the aggregation and deduction
    engines. Every failure is returned as a ``PayrollOutcome`` status.

Architecture position:
    Services layer. Owns no arithmetic; calls payroll_engines and reads
    through the payroll_ingestion protocols.

Invariants enforced:
    - ``compute()`` never raises for request or policy problems; typed
      kernel exceptions are caught here and mapped to an OutcomeStatus.
    - Source errors (missing workbook or sheet) are NOT request problems
      and propagate to the caller.
    - Each request runs inside its own ``LogContext`` so concurrent
      requests keep separate log fields.

Failure modes:
    - EMPLOYEE_NOT_FOUND: the directory has no profile for the number.
    - INVALID_MONTH: the month text is not a calendar month name.
    - MONTH_NOT_COMPUTABLE: the month has no pay period in the fiscal window.
    - POLICY_ERROR: non-positive hourly rate, or zero gross salary.
"""

from __future__ import annotations

from uuid import uuid4

from payroll_engines.aggregation import compute_monthly_gross
from payroll_engines.deductions import compute_deductions
from payroll_engines.periods import generate_pay_periods, normalize_month, periods_for_month
from payroll_engines.tracer import attendance_fingerprint
from payroll_ingestion.adapters.base import AttendanceSource, EmployeeDirectory
from payroll_kernel.domain.dtos import ValidationError
from payroll_kernel.domain.models import EmployeeProfile, PayrollResult
from payroll_kernel.domain.policy import DEFAULT_POLICY, PayrollPolicy
from payroll_kernel.exceptions import (
    EmployeeNotFoundError,
    InvalidHourlyRateError,
    InvalidMonthError,
)
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_services.models import OutcomeStatus, PayrollOutcome

logger = get_logger("services.payroll")


class PayrollService:
    """Compute a monthly pay statement for one employee."""

    def __init__(
        self,
        directory: EmployeeDirectory,
        attendance: AttendanceSource,
        policy: PayrollPolicy = DEFAULT_POLICY,
    ):
        self._directory = directory
        self._attendance = attendance
        self._policy = policy

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    def compute(self, employee_id: int, month: str) -> PayrollOutcome:
        """Run the full request and return its outcome."""
        with LogContext.bind(
            request_id=uuid4().hex,
            employee_id=employee_id,
            month=(month or "").strip().upper() or None,
        ):
            logger.info("payroll_request_started")
            outcome = self._compute(employee_id, month)
            logger.info(
                "payroll_request_completed",
                extra={
                    "status": outcome.status.value,
                    "net_pay": outcome.result.net_pay if outcome.result else None,
                    "error_codes": [e.code for e in outcome.errors],
                },
            )
            return outcome

    def check_employee(self, employee_id: int) -> PayrollOutcome | None:
        """Failure outcome when the employee cannot be priced, else None.

        Lets an interactive caller stop before asking for a month.
        """
        with LogContext.bind(request_id=uuid4().hex, employee_id=employee_id):
            resolved = self._resolve_employee(employee_id, month="")
            if isinstance(resolved, PayrollOutcome):
                return resolved
            return None

    def _resolve_employee(self, employee_id: int, month: str) -> EmployeeProfile | PayrollOutcome:
        try:
            return self._lookup(employee_id)
        except EmployeeNotFoundError as e:
            logger.warning("employee_not_found", extra={"error_code": e.code})
            return PayrollOutcome.failure(
                OutcomeStatus.EMPLOYEE_NOT_FOUND,
                ValidationError.from_exception(e, field="employee_id"),
                month=month,
            )
        except InvalidHourlyRateError as e:
            logger.error("employee_hourly_rate_invalid", extra={"hourly_rate": e.hourly_rate, "error_code": e.code})
            return PayrollOutcome.failure(
                OutcomeStatus.POLICY_ERROR,
                ValidationError.from_exception(e, field="hourly_rate"),
                month=month,
            )

    def _compute(self, employee_id: int, month: str) -> PayrollOutcome:
        profile = self._resolve_employee(employee_id, month)
        if isinstance(profile, PayrollOutcome):
            return profile

        try:
            month_name = normalize_month(month)
        except InvalidMonthError as e:
            logger.warning("month_invalid", extra={"raw_value": e.raw_value, "error_code": e.code})
            return PayrollOutcome.failure(
                OutcomeStatus.INVALID_MONTH,
                ValidationError.from_exception(e, field="month"),
                month=month,
                profile=profile,
            )

        periods = periods_for_month(generate_pay_periods(self._policy.fiscal_window), month_name)
        if not periods:
            window = self._policy.fiscal_window
            logger.warning(
                "month_not_computable",
                extra={"fiscal_start": window.start, "fiscal_end": window.end},
            )
            return PayrollOutcome.failure(
                OutcomeStatus.MONTH_NOT_COMPUTABLE,
                ValidationError(
                    code="MONTH_NOT_COMPUTABLE",
                    message=(
                        f"{month_name} has no pay periods between "
                        f"{window.start} and {window.end}."
                    ),
                    field="month",
                    details={"month": month_name},
                ),
                month=month_name,
                profile=profile,
            )

        records = tuple(
            self._attendance.attendance_for(employee_id, periods[0].start, periods[-1].end)
        )
        logger.info(
            "attendance_selected",
            extra={
                "record_count": len(records),
                "period_start": periods[0].start,
                "period_end": periods[-1].end,
                "attendance_fingerprint": attendance_fingerprint(records),
            },
        )
        try:
            gross = compute_monthly_gross(
                employee_id=employee_id,
                hourly_rate=profile.hourly_rate,
                month=month_name,
                periods=periods,
                records=records,
                policy=self._policy,
            )
        except InvalidHourlyRateError as e:
            logger.error("employee_hourly_rate_invalid", extra={"hourly_rate": e.hourly_rate, "error_code": e.code})
            return PayrollOutcome.failure(
                OutcomeStatus.POLICY_ERROR,
                ValidationError.from_exception(e, field="hourly_rate"),
                month=month_name,
                profile=profile,
            )

        deductions = compute_deductions(
            gross_salary=gross.gross_salary,
            monthly_benefits=profile.monthly_benefits,
        )
        if not deductions.is_valid:
            return PayrollOutcome.failure(
                OutcomeStatus.POLICY_ERROR,
                *deductions.validation.errors,
                month=month_name,
                profile=profile,
                weeks=gross.weeks,
            )

        result = PayrollResult(
            employee_id=employee_id,
            month=month_name,
            gross_salary=gross.gross_salary,
            deductions=deductions.breakdown,
            monthly_benefits=profile.monthly_benefits,
        )
        return PayrollOutcome.success(
            month=month_name,
            profile=profile,
            weeks=gross.weeks,
            result=result,
        )

    def _lookup(self, employee_id: int) -> EmployeeProfile:
        profile = self._directory.lookup_employee(employee_id)
        if profile is None:
            raise EmployeeNotFoundError(employee_id)
        return profile
