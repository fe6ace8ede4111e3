"""Payroll source adapters: protocols plus workbook and in-memory implementations."""

from payroll_ingestion.adapters.base import AttendanceSource, EmployeeDirectory
from payroll_ingestion.adapters.memory_adapter import InMemoryPayrollSource
from payroll_ingestion.adapters.xlsx_adapter import WorkbookPayrollSource

__all__ = [
    "AttendanceSource",
    "EmployeeDirectory",
    "InMemoryPayrollSource",
    "WorkbookPayrollSource",
]
