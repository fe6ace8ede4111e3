"""
Values -- monetary helpers for the payroll domain.

All monetary amounts are ``Decimal`` (never float) in the single reporting
currency. Rounding is explicit: callers quantize with ``round_money`` at the
points where an amount is reported.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CURRENCY_CODE = "PHP"
CURRENCY_SYMBOL = "Php"

CENT = Decimal("0.01")
ZERO = Decimal("0")
MINUTES_PER_HOUR = Decimal("60")


def to_decimal(value: Decimal | int | str | float, name: str = "amount") -> Decimal:
    """Convert a number to Decimal via its string form.

    Floats go through ``str`` so spreadsheet values such as ``535.71`` keep
    their printed digits instead of the binary expansion.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid {name}: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid {name}: {value!r} is not a finite number")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Quantize to centavos, half-up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
