"""
Deduction Calculator (``payroll_engines.deductions``).

Responsibility
--------------
Turn a gross monthly salary into statutory contributions, withholding tax
and net pay:

1. Social insurance -- 44-tier contribution table, ceiling lookup.
2. Health insurance -- 3% of salary within a floor and cap; the employee
   pays half.
3. Housing fund -- 1% in a narrow low band, 2% above it, capped.
4. Taxable income -- gross less the three contributions.
5. Withholding tax -- six progressive brackets.
6. Net pay -- gross less deductions plus monthly benefits.

Architecture position
---------------------
**Engines layer** -- pure functional core. Bracket tables are module-level
tuples built once at import and never mutated.

Invariants enforced
-------------------
* All arithmetic is ``Decimal``; every reported amount is rounded to
  centavos (ROUND_HALF_UP).
* Bracket upper bounds are inclusive and evaluated strictly in ascending
  order; no two brackets overlap.
* Social insurance is non-decreasing in salary.

Failure modes
-------------
* Non-positive gross salary: ``compute_deductions`` returns zero
  contributions and a ``INVALID_GROSS_SALARY`` validation error instead of
  raising. The single-contribution helpers return zero and log an error.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.dtos import ValidationError, ValidationResult
from payroll_kernel.domain.models import DeductionBreakdown
from payroll_kernel.domain.values import ZERO, round_money
from payroll_kernel.exceptions import InvalidGrossSalaryError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.deductions")


# ---------------------------------------------------------------------------
# Social insurance
# ---------------------------------------------------------------------------

SOCIAL_INSURANCE_FIRST_BOUND = Decimal("3250")
SOCIAL_INSURANCE_BRACKET_WIDTH = Decimal("500")
SOCIAL_INSURANCE_MIN_CONTRIBUTION = Decimal("135.00")
SOCIAL_INSURANCE_TIER_STEP = Decimal("22.50")
SOCIAL_INSURANCE_TIERS = 44

# (upper bound inclusive, contribution): 3,250 -> 135.00 .. 24,750 -> 1,102.50
SOCIAL_INSURANCE_TABLE: tuple[tuple[Decimal, Decimal], ...] = tuple(
    (
        SOCIAL_INSURANCE_FIRST_BOUND + SOCIAL_INSURANCE_BRACKET_WIDTH * i,
        SOCIAL_INSURANCE_MIN_CONTRIBUTION + SOCIAL_INSURANCE_TIER_STEP * i,
    )
    for i in range(SOCIAL_INSURANCE_TIERS)
)
_SOCIAL_INSURANCE_BOUNDS: tuple[Decimal, ...] = tuple(b for b, _ in SOCIAL_INSURANCE_TABLE)


def calculate_social_insurance(monthly_salary: Decimal) -> Decimal:
    """Contribution of the smallest bracket whose upper bound is >= salary.

    Salaries above the last bound pay the top tier. Non-positive salary
    returns zero.
    """
    if monthly_salary <= 0:
        logger.error(
            "social_insurance_invalid_salary",
            extra={"monthly_salary": monthly_salary},
        )
        return ZERO
    idx = bisect_left(_SOCIAL_INSURANCE_BOUNDS, monthly_salary)
    if idx >= len(SOCIAL_INSURANCE_TABLE):
        idx = len(SOCIAL_INSURANCE_TABLE) - 1
    return SOCIAL_INSURANCE_TABLE[idx][1]


# ---------------------------------------------------------------------------
# Health insurance
# ---------------------------------------------------------------------------

HEALTH_INSURANCE_RATE = Decimal("0.03")
HEALTH_INSURANCE_MIN_CONTRIBUTION = Decimal("300.00")
HEALTH_INSURANCE_MAX_CONTRIBUTION = Decimal("1800.00")
HEALTH_INSURANCE_EMPLOYEE_SHARE = Decimal("0.5")


@dataclass(frozen=True)
class HealthContribution:
    """Total premium and its employee/employer split."""

    total: Decimal
    employee_share: Decimal

    @property
    def employer_share(self) -> Decimal:
        return self.total - self.employee_share


def calculate_health_insurance(monthly_salary: Decimal) -> HealthContribution:
    """3% premium clamped to [300, 1,800]; half is deducted from the employee."""
    if monthly_salary <= 0:
        logger.error(
            "health_insurance_invalid_salary",
            extra={"monthly_salary": monthly_salary},
        )
        return HealthContribution(total=ZERO, employee_share=ZERO)
    premium = monthly_salary * HEALTH_INSURANCE_RATE
    premium = max(HEALTH_INSURANCE_MIN_CONTRIBUTION, min(premium, HEALTH_INSURANCE_MAX_CONTRIBUTION))
    total = round_money(premium)
    return HealthContribution(
        total=total,
        employee_share=round_money(total * HEALTH_INSURANCE_EMPLOYEE_SHARE),
    )


# ---------------------------------------------------------------------------
# Housing fund
# ---------------------------------------------------------------------------

HOUSING_FUND_BAND_FLOOR = Decimal("1000")
HOUSING_FUND_BAND_CEILING = Decimal("1500")
HOUSING_FUND_LOW_RATE = Decimal("0.01")
HOUSING_FUND_HIGH_RATE = Decimal("0.02")
HOUSING_FUND_MAX_CONTRIBUTION = Decimal("100.00")


def calculate_housing_fund(monthly_salary: Decimal) -> Decimal:
    """1% for 1,000..1,500 inclusive, 2% above (capped at 100), else zero."""
    if monthly_salary < HOUSING_FUND_BAND_FLOOR:
        return ZERO
    if monthly_salary <= HOUSING_FUND_BAND_CEILING:
        return round_money(monthly_salary * HOUSING_FUND_LOW_RATE)
    return round_money(min(monthly_salary * HOUSING_FUND_HIGH_RATE, HOUSING_FUND_MAX_CONTRIBUTION))


# ---------------------------------------------------------------------------
# Withholding tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxBracket:
    """Tax = base + (income - lower) x rate for lower < income <= upper."""

    lower: Decimal
    upper: Decimal | None  # None = unbounded
    base: Decimal
    rate: Decimal

    def applies_to(self, income: Decimal) -> bool:
        return self.upper is None or income <= self.upper

    def tax_for(self, income: Decimal) -> Decimal:
        return self.base + (income - self.lower) * self.rate


WITHHOLDING_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("20833"), Decimal("0"), Decimal("0")),
    TaxBracket(Decimal("20833"), Decimal("33333"), Decimal("0"), Decimal("0.20")),
    TaxBracket(Decimal("33333"), Decimal("66667"), Decimal("2500"), Decimal("0.25")),
    TaxBracket(Decimal("66667"), Decimal("166667"), Decimal("10833"), Decimal("0.30")),
    TaxBracket(Decimal("166667"), Decimal("666667"), Decimal("40833.33"), Decimal("0.32")),
    TaxBracket(Decimal("666667"), None, Decimal("200833.33"), Decimal("0.35")),
)


def find_tax_bracket(taxable_income: Decimal) -> TaxBracket:
    """First bracket, left to right, whose inclusive upper bound covers the income."""
    for bracket in WITHHOLDING_TAX_BRACKETS:
        if bracket.applies_to(taxable_income):
            return bracket
    return WITHHOLDING_TAX_BRACKETS[-1]


def calculate_withholding_tax(taxable_income: Decimal) -> Decimal:
    """Progressive withholding tax on monthly taxable income."""
    if taxable_income <= 0:
        return ZERO
    return round_money(find_tax_bracket(taxable_income).tax_for(taxable_income))


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeductionResult:
    """Deductions for one gross salary, or the reason they could not be computed."""

    gross_salary: Decimal
    monthly_benefits: Decimal
    breakdown: DeductionBreakdown
    validation: ValidationResult

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    @property
    def net_pay(self) -> Decimal:
        return self.gross_salary - self.breakdown.total_deductions + self.monthly_benefits


@traced_engine("deductions", "1.0", fingerprint_fields=("gross_salary", "monthly_benefits"))
def compute_deductions(
    *,
    gross_salary: Decimal,
    monthly_benefits: Decimal = ZERO,
) -> DeductionResult:
    """Apply the full deduction sequence to a gross monthly salary."""
    if gross_salary <= 0:
        err = InvalidGrossSalaryError(gross_salary)
        logger.error(
            "deductions_invalid_gross_salary",
            extra={"gross_salary": gross_salary, "error_code": err.code},
        )
        return DeductionResult(
            gross_salary=gross_salary,
            monthly_benefits=monthly_benefits,
            breakdown=DeductionBreakdown(),
            validation=ValidationResult.failure(
                ValidationError.from_exception(err, field="gross_salary")
            ),
        )

    social = calculate_social_insurance(gross_salary)
    health = calculate_health_insurance(gross_salary)
    housing = calculate_housing_fund(gross_salary)
    taxable = gross_salary - (social + health.employee_share + housing)
    tax = calculate_withholding_tax(taxable)

    breakdown = DeductionBreakdown(
        social_insurance=social,
        health_insurance_total=health.total,
        health_insurance_employee_share=health.employee_share,
        housing_fund=housing,
        taxable_income=taxable,
        withholding_tax=tax,
    )
    logger.info(
        "deductions_computed",
        extra={
            "gross_salary": gross_salary,
            "social_insurance": social,
            "health_insurance_employee_share": health.employee_share,
            "housing_fund": housing,
            "taxable_income": taxable,
            "withholding_tax": tax,
            "total_deductions": breakdown.total_deductions,
        },
    )
    return DeductionResult(
        gross_salary=gross_salary,
        monthly_benefits=monthly_benefits,
        breakdown=breakdown,
        validation=ValidationResult.success(),
    )
