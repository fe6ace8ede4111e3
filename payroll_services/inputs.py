"""
Raw request input parsing for callers that collect text (CLI, prompts).

Both parsers raise typed ``InputError`` subclasses so a caller can show the
message and ask again.
"""

from __future__ import annotations

from payroll_engines.periods import normalize_month
from payroll_kernel.exceptions import InvalidEmployeeNumberError


def parse_employee_number(raw: str | int) -> int:
    """Read an employee number from user text.

    Raises:
        InvalidEmployeeNumberError: empty, non-numeric or non-positive text.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    else:
        text = str(raw or "").strip()
        try:
            value = int(text)
        except ValueError as e:
            raise InvalidEmployeeNumberError(text) from e
    if value <= 0:
        raise InvalidEmployeeNumberError(str(raw))
    return value


def parse_month(raw: str) -> str:
    """Full English month name, case-insensitive, returned upper-case.

    Raises:
        InvalidMonthError: anything that is not a calendar month name.
    """
    return normalize_month(raw)
