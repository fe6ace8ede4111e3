"""
Plain-text pay statement rendering.

Layout: employee header, one block per pay period, gross salary, then the
deduction lines and net pay. Amounts use ``#,##0.00`` with the ``Php``
prefix; dates use MM/DD/YYYY.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_kernel.domain.models import WeeklyTotals
from payroll_kernel.domain.values import CURRENCY_SYMBOL, round_money
from payroll_services.models import PayrollOutcome

RULE = "-" * 39
WEEK_RULE = "-" * 25
STATEMENT_DATE_FORMAT = "%m/%d/%Y"


def format_money(amount: Decimal) -> str:
    """``Php 1,234.50``; half-up rounded to centavos."""
    return f"{CURRENCY_SYMBOL} {round_money(amount):,.2f}"


def format_duration(minutes: int, hour_label: str = "hrs") -> str:
    hours, rest = divmod(minutes, 60)
    return f"{hours} {hour_label} {rest} min/s"


def _render_week(week: WeeklyTotals) -> list[str]:
    period = week.period
    return [
        f"Week {period.iso_week}: {period.start:{STATEMENT_DATE_FORMAT}} "
        f"to {period.end:{STATEMENT_DATE_FORMAT}}",
        f"Regular Hours: {format_duration(week.regular_minutes)}",
        f"Accumulated Late Time: {format_duration(week.late_minutes, 'hr/s')}",
        f"Regular Pay: {format_money(week.regular_pay)}",
        f"Overtime Pay: {format_money(week.overtime_pay)}",
        "",
        f"Weekly Salary: {format_money(week.weekly_salary)}",
        WEEK_RULE,
    ]


def render_statement(outcome: PayrollOutcome) -> str:
    """Render an outcome as the printable pay statement.

    Failures render the employee header when the employee was resolved,
    any pay periods already computed, then the error messages.
    """
    lines: list[str] = []
    profile = outcome.profile
    if profile is not None:
        lines += [
            "========Employee Payroll Summary=======",
            f"Employee Number: {profile.employee_id}",
            f"Name: {profile.display_name}",
            f"Birthday: {profile.birth_date:{STATEMENT_DATE_FORMAT}}" if profile.birth_date else "Birthday: N/A",
            RULE,
            f"             {outcome.month}",
            RULE,
        ]

    for week in outcome.weeks:
        lines += _render_week(week)

    if not outcome.is_success:
        lines += [f"Error: {e.message}" for e in outcome.errors]
        return "\n".join(lines)

    result = outcome.result
    d = result.deductions
    lines += [
        f"Gross Salary: {format_money(result.gross_salary)}",
        RULE,
        "Deductions:",
        f"SSS: {format_money(d.social_insurance)}",
        f"PhilHealth: {format_money(d.health_insurance_employee_share)}",
        f"Pag-IBIG: {format_money(d.housing_fund)}",
        f"Withholding Tax: {format_money(d.withholding_tax)}",
        f"Monthly Benefits: {format_money(result.monthly_benefits)}",
        f"Net Pay: {format_money(result.net_pay)}",
    ]
    return "\n".join(lines)
