"""
Validation DTOs shared by engines and services.

Result-style failures: engines report business-rule problems as
``ValidationError`` values inside their results instead of raising, so one
bad input never aborts a whole payroll request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from payroll_kernel.exceptions import PayrollKernelError


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message, optional field
        path, and optional details dict.

    Guarantees:
        - Immutable (frozen dataclass)
        - code is always present
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None

    @classmethod
    def from_exception(
        cls,
        exc: PayrollKernelError,
        field: str | None = None,
    ) -> ValidationError:
        """Build an error from a typed kernel exception, keeping its attributes."""
        details = {
            k: v for k, v in vars(exc).items() if not k.startswith("_")
        }
        return cls(
            code=exc.code,
            message=str(exc),
            field=field,
            details=details or None,
        )


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validation.

    Aggregates zero or more ValidationErrors. is_valid is True only when
    there are no errors; bool(result) == result.is_valid.
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        """Create a failed validation result."""
        return cls(is_valid=False, errors=tuple(errors))

    def __bool__(self) -> bool:
        return self.is_valid
