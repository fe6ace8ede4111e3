"""
Pay Policy -- fixed schedule, fiscal window and overtime constants.

Responsibility:
    Names every policy constant the engines read: the daily work schedule,
    the payroll fiscal window and the overtime premium. Engines take a
    ``PayrollPolicy`` parameter defaulting to ``DEFAULT_POLICY`` so the
    constants can be overridden (configuration, tests) without editing the
    engines.

Invariants enforced:
    - schedule start < lunch start <= lunch end < schedule end
    - fiscal start <= fiscal end
    - overtime premium >= 0

Failure modes:
    - ValueError on construction when an invariant does not hold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.values import MINUTES_PER_HOUR


class OvertimeMode(str, Enum):
    """How the overtime premium is applied to overtime hours.

    FULL_RATE pays each overtime hour at ``rate * (1 + premium)``.
    PREMIUM_ONLY pays only the bonus ``rate * premium`` per overtime hour.
    """

    FULL_RATE = "full_rate"
    PREMIUM_ONLY = "premium_only"


OVERTIME_PREMIUM = Decimal("0.25")


@dataclass(frozen=True)
class WorkSchedule:
    """Scheduled workday with an unpaid lunch break."""

    start: time = time(8, 0)
    end: time = time(17, 0)
    lunch_start: time = time(12, 0)
    lunch_end: time = time(13, 0)

    # Warning thresholds for implausible punches
    late_login_warning: time = time(12, 0)
    early_logout_warning: time = time(8, 0)

    def __post_init__(self) -> None:
        if not (self.start < self.lunch_start <= self.lunch_end < self.end):
            raise ValueError(
                "schedule must satisfy start < lunch_start <= lunch_end < end, "
                f"got {self.start}-{self.lunch_start}-{self.lunch_end}-{self.end}"
            )


@dataclass(frozen=True)
class OvertimePolicy:
    """Overtime premium and the formula it is applied with."""

    premium: Decimal = OVERTIME_PREMIUM
    mode: OvertimeMode = OvertimeMode.FULL_RATE

    def __post_init__(self) -> None:
        if self.premium < 0:
            raise ValueError("overtime premium cannot be negative")

    @property
    def rate_factor(self) -> Decimal:
        """Multiplier applied to the base hourly rate for each overtime hour."""
        if self.mode is OvertimeMode.PREMIUM_ONLY:
            return self.premium
        return Decimal("1") + self.premium

    def pay_for(self, minutes: int, hourly_rate: Decimal) -> Decimal:
        """Unrounded pay for ``minutes`` of overtime at ``hourly_rate``."""
        return Decimal(minutes) * hourly_rate * self.rate_factor / MINUTES_PER_HOUR


@dataclass(frozen=True)
class FiscalWindow:
    """Inclusive date range the payroll year's weekly periods cover."""

    start: date = date(2024, 6, 3)
    end: date = date(2024, 12, 31)

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"fiscal window start {self.start} is after end {self.end}"
            )


@dataclass(frozen=True)
class PayrollPolicy:
    """Every policy value the engines need, bundled for one jurisdiction."""

    schedule: WorkSchedule = field(default_factory=WorkSchedule)
    overtime: OvertimePolicy = field(default_factory=OvertimePolicy)
    fiscal_window: FiscalWindow = field(default_factory=FiscalWindow)


DEFAULT_POLICY = PayrollPolicy()
