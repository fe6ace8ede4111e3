"""
Collaborator protocols for employee and attendance data.

Contract:
    EmployeeDirectory.lookup_employee() returns the profile for an employee
    number, or None when no such employee exists.
    AttendanceSource.attendance_for() yields the employee's attendance rows
    for an inclusive date range. Order is irrelevant; the engine filters by
    employee and date again.

Architecture: payroll_ingestion/adapters. File I/O only, no engine imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable

from payroll_kernel.domain.models import AttendanceRecord, EmployeeProfile


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Looks up employee master data by employee number."""

    def lookup_employee(self, employee_id: int) -> EmployeeProfile | None:
        ...


@runtime_checkable
class AttendanceSource(Protocol):
    """Supplies raw attendance rows for one employee and date range."""

    def attendance_for(
        self,
        employee_id: int,
        start: date,
        end: date,
    ) -> Iterable[AttendanceRecord]:
        ...
