"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    attendance-to-pay engines. This is the canonical import surface for
    higher layers (payroll_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel (and sibling engine modules).
    MUST NOT import payroll_services, payroll_config or payroll_ingestion.

Invariants enforced:
    - Purity: engines never read the clock or a file; dates and records are
      passed in as explicit parameters.
    - Decimal-only arithmetic for money.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from payroll_engines.periods import generate_pay_periods, periods_for_month
    from payroll_engines.aggregation import compute_monthly_gross
    from payroll_engines.deductions import compute_deductions
"""

from payroll_engines.aggregation import (
    MonthlyGross,
    compute_monthly_gross,
    compute_weekly_totals,
    records_in_period,
)
from payroll_engines.attendance import (
    evaluate_day,
    minutes_between,
    parse_clock_time,
)
from payroll_engines.deductions import (
    SOCIAL_INSURANCE_TABLE,
    WITHHOLDING_TAX_BRACKETS,
    DeductionResult,
    HealthContribution,
    TaxBracket,
    calculate_health_insurance,
    calculate_housing_fund,
    calculate_social_insurance,
    calculate_withholding_tax,
    compute_deductions,
)
from payroll_engines.periods import (
    generate_pay_periods,
    normalize_month,
    periods_for_month,
)
from payroll_engines.tracer import attendance_fingerprint, traced_engine

__all__ = [
    # aggregation
    "MonthlyGross",
    "compute_monthly_gross",
    "compute_weekly_totals",
    "records_in_period",
    # attendance
    "evaluate_day",
    "minutes_between",
    "parse_clock_time",
    # deductions
    "SOCIAL_INSURANCE_TABLE",
    "WITHHOLDING_TAX_BRACKETS",
    "DeductionResult",
    "HealthContribution",
    "TaxBracket",
    "calculate_health_insurance",
    "calculate_housing_fund",
    "calculate_social_insurance",
    "calculate_withholding_tax",
    "compute_deductions",
    # periods
    "generate_pay_periods",
    "normalize_month",
    "periods_for_month",
    # tracer
    "attendance_fingerprint",
    "traced_engine",
]
