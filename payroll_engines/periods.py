"""
Period Generator (``payroll_engines.periods``).

Responsibility
--------------
Partition the payroll fiscal window into weekly pay periods and select the
periods that belong to a requested calendar month.

Invariants enforced
-------------------
* Periods are contiguous and non-overlapping.
* Every period is 7 days long except the last, which is clipped to the
  fiscal end date.
* A period belongs to the month its start date falls in.

Failure modes
-------------
* ``InvalidMonthError`` when the month name is not a calendar month.
* An empty tuple from ``periods_for_month`` means the month is valid but
  outside the fiscal window; callers must treat it as "not computable".
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from payroll_kernel.domain.models import MONTH_NAMES, PayPeriod
from payroll_kernel.domain.policy import DEFAULT_POLICY, FiscalWindow
from payroll_kernel.exceptions import InvalidMonthError

PERIOD_LENGTH_DAYS = 7


def normalize_month(month: str) -> str:
    """Return the upper-case month name, or raise InvalidMonthError."""
    normalized = (month or "").strip().upper()
    if normalized not in MONTH_NAMES:
        raise InvalidMonthError(month)
    return normalized


@lru_cache(maxsize=8)
def generate_pay_periods(
    window: FiscalWindow = DEFAULT_POLICY.fiscal_window,
) -> tuple[PayPeriod, ...]:
    """Build the ordered weekly periods covering ``window``.

    The result is cached per window; it is an immutable tuple of frozen
    periods so sharing it between requests is safe.
    """
    periods: list[PayPeriod] = []
    week_start = window.start
    sequence = 1
    while week_start <= window.end:
        week_end = min(week_start + timedelta(days=PERIOD_LENGTH_DAYS - 1), window.end)
        periods.append(
            PayPeriod(
                sequence=sequence,
                iso_week=week_start.isocalendar().week,
                start=week_start,
                end=week_end,
            )
        )
        week_start += timedelta(days=PERIOD_LENGTH_DAYS)
        sequence += 1
    return tuple(periods)


def periods_for_month(
    periods: tuple[PayPeriod, ...],
    month: str,
) -> tuple[PayPeriod, ...]:
    """Select the periods whose start date falls in ``month`` (case-insensitive)."""
    target = normalize_month(month)
    return tuple(p for p in periods if p.month_name == target)
