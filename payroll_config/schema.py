"""
Payroll settings schema.

Frozen dataclasses the YAML settings file is parsed into. The pay policy
itself (``PayrollPolicy``) lives in the kernel so engines never import
configuration; this module only wraps it with the caller-side settings
(where the workbook is, how to log).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from payroll_kernel.domain.policy import DEFAULT_POLICY, PayrollPolicy

DEFAULT_EMPLOYEE_SHEET = "Employee Details"
DEFAULT_ATTENDANCE_SHEET = "Attendance Record"


@dataclass(frozen=True)
class SourceSettings:
    """Location and layout of the employee/attendance workbook."""

    workbook: Path | None = None
    employee_sheet: str = DEFAULT_EMPLOYEE_SHEET
    attendance_sheet: str = DEFAULT_ATTENDANCE_SHEET


@dataclass(frozen=True)
class LoggingSettings:
    """Log level name and optional append-only log file."""

    level: str = "INFO"
    log_file: Path | None = None

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


@dataclass(frozen=True)
class PayrollSettings:
    """Everything a payroll run needs besides the request itself."""

    policy: PayrollPolicy = field(default_factory=lambda: DEFAULT_POLICY)
    source: SourceSettings = field(default_factory=SourceSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
