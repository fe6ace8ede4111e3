"""
Tests for PayrollService.

Covers:
- Successful monthly computation end to end over the in-memory source
- Every failure status
- Request-scoped log context
"""

from datetime import date, time
from decimal import Decimal

import pytest

from payroll_ingestion.adapters.memory_adapter import InMemoryPayrollSource
from payroll_kernel.domain.models import EmployeeProfile
from payroll_kernel.domain.policy import OvertimeMode, OvertimePolicy, PayrollPolicy
from payroll_services import OutcomeStatus, PayrollOutcome, PayrollService


class _RaisingDirectory:
    """Directory whose stored row has an unusable hourly rate."""

    def lookup_employee(self, employee_id):
        EmployeeProfile(
            employee_id=employee_id,
            first_name="Bad",
            last_name="Rate",
            birth_date=None,
            hourly_rate=Decimal("0"),
        )


class TestSuccess:

    def test_june(self, memory_source, profile):
        outcome = PayrollService(memory_source, memory_source).compute(profile.employee_id, "june")
        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.is_success
        assert outcome.month == "JUNE"
        assert len(outcome.weeks) == 4
        result = outcome.result
        assert result.gross_salary == sum((w.weekly_salary for w in outcome.weeks), Decimal("0"))
        assert result.monthly_benefits == Decimal("4500")
        assert result.net_pay == result.gross_salary - result.total_deductions + Decimal("4500")
        assert outcome.errors == ()

    def test_first_week_figures(self, memory_source, profile):
        outcome = PayrollService(memory_source, memory_source).compute(profile.employee_id, "JUNE")
        week = outcome.weeks[0]
        assert week.regular_minutes == 2325
        assert week.late_minutes == 75
        # 2325 / 60 x 535.71
        assert week.regular_pay == Decimal("20758.76")
        # 2 h x 535.71 x 1.25
        assert week.overtime_pay == Decimal("1339.28")

    def test_policy_is_passed_through(self, memory_source, profile):
        policy = PayrollPolicy(overtime=OvertimePolicy(mode=OvertimeMode.PREMIUM_ONLY))
        outcome = PayrollService(memory_source, memory_source, policy=policy).compute(profile.employee_id, "JUNE")
        # 2 h x 535.71 x 0.25
        assert outcome.weeks[0].overtime_pay == Decimal("267.86")


class TestFailures:

    def test_employee_not_found(self, memory_source):
        outcome = PayrollService(memory_source, memory_source).compute(99999, "JUNE")
        assert outcome.status is OutcomeStatus.EMPLOYEE_NOT_FOUND
        assert outcome.profile is None
        assert outcome.result is None
        [error] = outcome.errors
        assert error.code == "EMPLOYEE_NOT_FOUND"
        assert error.details == {"employee_id": 99999}

    @pytest.mark.parametrize("month", ["", "Jun", "Smarch"])
    def test_invalid_month(self, memory_source, profile, month):
        outcome = PayrollService(memory_source, memory_source).compute(profile.employee_id, month)
        assert outcome.status is OutcomeStatus.INVALID_MONTH
        assert outcome.profile == profile
        assert outcome.errors[0].code == "INVALID_MONTH"

    def test_month_outside_fiscal_window(self, memory_source, profile):
        outcome = PayrollService(memory_source, memory_source).compute(profile.employee_id, "JANUARY")
        assert outcome.status is OutcomeStatus.MONTH_NOT_COMPUTABLE
        assert outcome.weeks == ()
        assert outcome.errors[0].code == "MONTH_NOT_COMPUTABLE"

    def test_no_attendance_is_policy_error(self, profile):
        source = InMemoryPayrollSource(employees=[profile])
        outcome = PayrollService(source, source).compute(profile.employee_id, "JULY")
        assert outcome.status is OutcomeStatus.POLICY_ERROR
        assert len(outcome.weeks) == 5
        assert outcome.errors[0].code == "INVALID_GROSS_SALARY"

    def test_invalid_hourly_rate(self, memory_source):
        outcome = PayrollService(_RaisingDirectory(), memory_source).compute(10001, "JUNE")
        assert outcome.status is OutcomeStatus.POLICY_ERROR
        assert outcome.errors[0].code == "INVALID_HOURLY_RATE"

    def test_failure_requires_error_status(self):
        with pytest.raises(ValueError):
            PayrollOutcome.failure(OutcomeStatus.SUCCESS, month="JUNE")


class TestEmployeeCheck:

    def test_known_employee_passes(self, memory_source, profile):
        assert PayrollService(memory_source, memory_source).check_employee(profile.employee_id) is None

    def test_unknown_employee(self, memory_source):
        outcome = PayrollService(memory_source, memory_source).check_employee(99999)
        assert outcome.status is OutcomeStatus.EMPLOYEE_NOT_FOUND
        assert outcome.errors[0].message == "Employee Number 99999 not found."

    def test_unusable_rate(self, memory_source):
        outcome = PayrollService(_RaisingDirectory(), memory_source).check_employee(10001)
        assert outcome.status is OutcomeStatus.POLICY_ERROR


class TestLogging:

    def test_request_context_in_logs(self, memory_source, profile, log_capture):
        PayrollService(memory_source, memory_source).compute(profile.employee_id, "june")
        [done] = log_capture.with_message("payroll_request_completed")
        assert done["status"] == "success"
        assert done["employee_id"] == str(profile.employee_id)
        assert done["month"] == "JUNE"
        assert done["request_id"]

    def test_attendance_fingerprint_ignores_row_order(self, profile, june_week_records, log_capture):
        forward = InMemoryPayrollSource(employees=[profile], attendance=june_week_records)
        backward = InMemoryPayrollSource(employees=[profile], attendance=list(reversed(june_week_records)))
        PayrollService(forward, forward).compute(profile.employee_id, "JUNE")
        PayrollService(backward, backward).compute(profile.employee_id, "JUNE")
        first, second = log_capture.with_message("attendance_selected")
        assert first["record_count"] == len(june_week_records)
        assert first["attendance_fingerprint"] == second["attendance_fingerprint"]

    def test_context_cleared_after_request(self, memory_source, profile):
        from payroll_kernel.logging_config import LogContext

        PayrollService(memory_source, memory_source).compute(profile.employee_id, "JUNE")
        assert LogContext.get_all() == {}

    def test_skipped_days_logged(self, profile, record_factory, log_capture):
        source = InMemoryPayrollSource(
            employees=[profile],
            attendance=[
                record_factory(date(2024, 6, 3)),
                record_factory(date(2024, 6, 4), clock_in=time(18, 0), clock_out=time(9, 0)),
            ],
        )
        outcome = PayrollService(source, source).compute(profile.employee_id, "JUNE")
        assert outcome.is_success
        assert outcome.weeks[0].days_skipped == 1
        [rejected] = log_capture.with_message("attendance_clock_out_before_clock_in")
        assert rejected["period"] == "2024-06-03/2024-06-09"
        assert rejected["employee_id"] == str(profile.employee_id)
