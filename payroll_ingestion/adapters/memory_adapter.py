"""In-memory employee directory and attendance source."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from payroll_kernel.domain.models import AttendanceRecord, EmployeeProfile


class InMemoryPayrollSource:
    """Serve already-built profiles and attendance rows from Python sequences.

    Useful for embedding the engine behind another data layer and for tests.
    Duplicate employee numbers keep the first profile, like a top-down sheet
    scan.
    """

    def __init__(
        self,
        employees: Iterable[EmployeeProfile] = (),
        attendance: Iterable[AttendanceRecord] = (),
    ):
        profiles: dict[int, EmployeeProfile] = {}
        for profile in employees:
            profiles.setdefault(profile.employee_id, profile)
        self._profiles = profiles
        self._attendance = tuple(attendance)

    def lookup_employee(self, employee_id: int) -> EmployeeProfile | None:
        return self._profiles.get(employee_id)

    def attendance_for(
        self,
        employee_id: int,
        start: date,
        end: date,
    ) -> tuple[AttendanceRecord, ...]:
        return tuple(
            r for r in self._attendance
            if r.employee_id == employee_id and start <= r.work_date <= end
        )
