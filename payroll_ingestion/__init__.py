"""
payroll_ingestion -- reading employee and attendance data from outside sources.

Adapters return domain models from ``payroll_kernel.domain`` and never call
the engines; ``payroll_services`` wires them together.
"""

from payroll_ingestion.adapters import (
    AttendanceSource,
    EmployeeDirectory,
    InMemoryPayrollSource,
    WorkbookPayrollSource,
)

__all__ = [
    "AttendanceSource",
    "EmployeeDirectory",
    "InMemoryPayrollSource",
    "WorkbookPayrollSource",
]
