"""
Pytest fixtures for the payroll test suite.

Provides:
- Logging state reset between tests
- A JSON log capture handler
- Sample employee profile and attendance rows
- An in-memory source wired to the sample data
"""

import json
import logging
from datetime import date, time
from decimal import Decimal
from io import StringIO

import pytest

from payroll_ingestion.adapters.memory_adapter import InMemoryPayrollSource
from payroll_kernel.domain.models import AttendanceRecord, EmployeeProfile
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

EMPLOYEE_ID = 10001


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


class LogCapture:
    """Structured log lines written during a test."""

    def __init__(self, stream: StringIO):
        self._stream = stream

    @property
    def records(self) -> list[dict]:
        lines = self._stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [r["message"] for r in self.records]

    def with_message(self, message: str) -> list[dict]:
        return [r for r in self.records if r["message"] == message]


@pytest.fixture
def log_capture() -> LogCapture:
    """Configure payroll logging at DEBUG into an in-memory stream."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler, level=logging.DEBUG)
    return LogCapture(stream)


@pytest.fixture
def profile() -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=EMPLOYEE_ID,
        first_name="Manuel III",
        last_name="Garcia",
        birth_date=date(1983, 10, 11),
        hourly_rate=Decimal("535.71"),
        rice_subsidy=Decimal("1500"),
        phone_allowance=Decimal("2000"),
        clothing_allowance=Decimal("1000"),
    )


def make_record(
    work_date: date,
    clock_in: time | str | None = time(8, 0),
    clock_out: time | str | None = time(17, 0),
    employee_id: int = EMPLOYEE_ID,
) -> AttendanceRecord:
    return AttendanceRecord(
        employee_id=employee_id,
        work_date=work_date,
        clock_in=clock_in,
        clock_out=clock_out,
    )


@pytest.fixture
def june_week_records() -> list[AttendanceRecord]:
    """Mon 2024-06-03 .. Fri 2024-06-07, on time every day, one late day."""
    return [
        make_record(date(2024, 6, 3)),
        make_record(date(2024, 6, 4)),
        make_record(date(2024, 6, 5), clock_in=time(9, 15)),
        make_record(date(2024, 6, 6)),
        make_record(date(2024, 6, 7), clock_out=time(19, 0)),
    ]


@pytest.fixture
def memory_source(profile, june_week_records) -> InMemoryPayrollSource:
    return InMemoryPayrollSource(employees=[profile], attendance=june_week_records)


@pytest.fixture
def record_factory():
    """The ``make_record`` helper, for tests that build their own rows."""
    return make_record
