"""
Tests for the XLSX payroll source.

Workbooks are generated with openpyxl in tmp_path; no fixture files.

Covers:
- Employee lookup with the fixed column layout
- Attendance rows from datetime cells and text cells
- Malformed rows skipped with a warning
- Missing file, unreadable file and missing sheet errors
"""

from datetime import date, datetime, time
from decimal import Decimal

import openpyxl
import pytest

from payroll_ingestion.adapters.base import AttendanceSource, EmployeeDirectory
from payroll_ingestion.adapters.xlsx_adapter import (
    WorkbookPayrollSource,
    parse_cell_amount,
    parse_cell_date,
    parse_employee_number,
    to_clock_value,
)
from payroll_kernel.exceptions import (
    InvalidHourlyRateError,
    SourceFileNotFoundError,
    SourceSheetNotFoundError,
    SourceUnreadableError,
)

EMPLOYEE_HEADER = [
    "Employee #", "Last Name", "First Name", "Birthday", "Address", "Phone Number",
    "SSS #", "Philhealth #", "TIN #", "Pag-ibig #", "Status", "Position",
    "Immediate Supervisor", "Basic Salary", "Rice Subsidy", "Phone Allowance",
    "Clothing Allowance", "Gross Semi-monthly Rate", "Hourly Rate",
]
ATTENDANCE_HEADER = ["Employee #", "Last Name", "First Name", "Date", "Log In", "Log Out"]


def _employee_row(number, last, first, birthday, rice, phone, clothing, rate):
    row = [None] * len(EMPLOYEE_HEADER)
    row[0], row[1], row[2], row[3] = number, last, first, birthday
    row[14], row[15], row[16], row[18] = rice, phone, clothing, rate
    return row


def _build_workbook(path, employees, attendance, *, employee_sheet="Employee Details",
                    attendance_sheet="Attendance Record"):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = employee_sheet
    ws.append(EMPLOYEE_HEADER)
    for row in employees:
        ws.append(row)
    if attendance_sheet is not None:
        ws = wb.create_sheet(attendance_sheet)
        ws.append(ATTENDANCE_HEADER)
        for row in attendance:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def workbook(tmp_path):
    employees = [
        _employee_row(10001, "Garcia", "Manuel III", "10/11/1983", 1500, 2000, 1000, 535.71),
        _employee_row("10002", "Lim", "Antonio", datetime(1988, 6, 19), "1,500", "2,000", "1,000", 357.14),
        _employee_row(10003, "Aquino", "Bianca", None, None, None, None, 0),
        _employee_row("not-a-number", "Broken", "Row", None, 0, 0, 0, 100),
    ]
    attendance = [
        [10001, "Garcia", "Manuel III", datetime(2024, 6, 3), time(8, 59), time(18, 31)],
        [10001, "Garcia", "Manuel III", "06/04/2024", "8:00", "17:00"],
        [10001, "Garcia", "Manuel III", "06/05/2024", None, "17:00"],
        [10001, "Garcia", "Manuel III", "2024-06-06", "8:00", "17:00"],
        [10002, "Lim", "Antonio", "06/03/2024", "8:00", "17:00"],
        [10001.0, "Garcia", "Manuel III", "07/01/2024", "8:00", "17:00"],
    ]
    return _build_workbook(tmp_path / "payroll.xlsx", employees, attendance)


class TestEmployeeLookup:

    def test_profile_columns(self, workbook):
        source = WorkbookPayrollSource(workbook)
        profile = source.lookup_employee(10001)
        assert profile.first_name == "Manuel III"
        assert profile.last_name == "Garcia"
        assert profile.birth_date == date(1983, 10, 11)
        assert profile.hourly_rate == Decimal("535.71")
        assert profile.monthly_benefits == Decimal("4500")

    def test_text_number_and_thousands_separators(self, workbook):
        profile = WorkbookPayrollSource(workbook).lookup_employee(10002)
        assert profile.birth_date == date(1988, 6, 19)
        assert profile.rice_subsidy == Decimal("1500")
        assert profile.monthly_benefits == Decimal("4500")

    def test_unknown_employee(self, workbook):
        assert WorkbookPayrollSource(workbook).lookup_employee(99999) is None

    def test_zero_rate_raises_for_matching_row(self, workbook):
        with pytest.raises(InvalidHourlyRateError) as exc_info:
            WorkbookPayrollSource(workbook).lookup_employee(10003)
        assert exc_info.value.employee_id == 10003

    def test_non_finite_rate_row_skipped(self, tmp_path, log_capture):
        path = _build_workbook(
            tmp_path / "payroll.xlsx",
            [_employee_row(10004, "Reyes", "Isabella", None, 0, 0, 0, "NaN")],
            [],
        )
        assert WorkbookPayrollSource(path).lookup_employee(10004) is None
        [warning] = log_capture.with_message("employee_row_unreadable")
        assert "hourly_rate" in warning["error"]

    def test_implements_protocols(self, workbook):
        source = WorkbookPayrollSource(workbook)
        assert isinstance(source, EmployeeDirectory)
        assert isinstance(source, AttendanceSource)


class TestAttendance:

    def test_filters_by_employee_and_range(self, workbook):
        rows = WorkbookPayrollSource(workbook).attendance_for(10001, date(2024, 6, 3), date(2024, 6, 9))
        assert [r.work_date for r in rows] == [date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 5)]

    def test_cell_types_preserved_for_evaluator(self, workbook):
        rows = WorkbookPayrollSource(workbook).attendance_for(10001, date(2024, 6, 3), date(2024, 6, 5))
        assert rows[0].clock_in == time(8, 59)
        assert rows[1].clock_in == "8:00"
        assert rows[2].clock_in is None

    def test_float_employee_number(self, workbook):
        rows = WorkbookPayrollSource(workbook).attendance_for(10001, date(2024, 7, 1), date(2024, 7, 1))
        assert len(rows) == 1

    def test_unreadable_date_skipped_with_warning(self, workbook, log_capture):
        source = WorkbookPayrollSource(workbook)
        rows = source.attendance_for(10001, date(2024, 6, 1), date(2024, 6, 30))
        assert date(2024, 6, 6) not in [r.work_date for r in rows]
        [warning] = log_capture.with_message("attendance_row_unreadable")
        assert warning["row"] == 5


class TestSourceErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceFileNotFoundError) as exc_info:
            WorkbookPayrollSource(tmp_path / "absent.xlsx")
        assert exc_info.value.code == "SOURCE_FILE_NOT_FOUND"

    def test_missing_sheet(self, tmp_path):
        path = _build_workbook(tmp_path / "payroll.xlsx", [], [], attendance_sheet=None)
        source = WorkbookPayrollSource(path)
        with pytest.raises(SourceSheetNotFoundError) as exc_info:
            source.lookup_employee(10001)
        assert exc_info.value.sheet_name == "Attendance Record"

    def test_file_that_is_not_a_workbook(self, tmp_path, log_capture):
        path = tmp_path / "payroll.xlsx"
        path.write_text("Employee #,Last Name\n10001,Garcia\n")
        source = WorkbookPayrollSource(path)
        with pytest.raises(SourceUnreadableError) as exc_info:
            source.lookup_employee(10001)
        assert exc_info.value.code == "SOURCE_UNREADABLE"
        assert exc_info.value.path == str(path)
        assert log_capture.with_message("workbook_unreadable")

    def test_unreadable_file_also_fails_attendance(self, tmp_path):
        path = tmp_path / "payroll.xlsx"
        path.write_bytes(b"PK\x03\x04 truncated")
        with pytest.raises(SourceUnreadableError):
            WorkbookPayrollSource(path).attendance_for(10001, date(2024, 6, 1), date(2024, 6, 30))

    def test_custom_sheet_names(self, tmp_path):
        path = _build_workbook(
            tmp_path / "payroll.xlsx",
            [_employee_row(1, "A", "B", None, 0, 0, 0, 100)],
            [],
            employee_sheet="Staff",
            attendance_sheet="Punches",
        )
        source = WorkbookPayrollSource(path, employee_sheet="Staff", attendance_sheet="Punches")
        assert source.lookup_employee(1).hourly_rate == Decimal("100")


class TestCellParsers:

    @pytest.mark.parametrize("value, expected", [(10001, 10001), (10001.0, 10001), (" 10001 ", 10001)])
    def test_employee_number(self, value, expected):
        assert parse_employee_number(value) == expected

    @pytest.mark.parametrize("value", [None, True, 10001.5, "abc"])
    def test_bad_employee_number(self, value):
        with pytest.raises(ValueError):
            parse_employee_number(value)

    def test_dates(self):
        assert parse_cell_date("06/03/2024") == date(2024, 6, 3)
        assert parse_cell_date(datetime(2024, 6, 3, 0, 0)) == date(2024, 6, 3)
        with pytest.raises(ValueError):
            parse_cell_date(45446)

    def test_amounts(self):
        assert parse_cell_amount(None, "x") == Decimal("0")
        assert parse_cell_amount("90,000", "x") == Decimal("90000")
        assert parse_cell_amount(535.71, "x") == Decimal("535.71")

    def test_clock_values(self):
        assert to_clock_value(datetime(1899, 12, 30, 8, 15)) == time(8, 15)
        assert to_clock_value(815) == "815"
