"""
payroll_services -- request orchestration and caller-side helpers.

Usage:
    from payroll_services import PayrollService, render_statement

    service = PayrollService(source, source, policy=settings.policy)
    outcome = service.compute(10001, "JUNE")
    print(render_statement(outcome))
"""

from payroll_services.inputs import parse_employee_number, parse_month
from payroll_services.models import OutcomeStatus, PayrollOutcome
from payroll_services.payroll_service import PayrollService
from payroll_services.statement import format_duration, format_money, render_statement

__all__ = [
    "OutcomeStatus",
    "PayrollOutcome",
    "PayrollService",
    "format_duration",
    "format_money",
    "parse_employee_number",
    "parse_month",
    "render_statement",
]
