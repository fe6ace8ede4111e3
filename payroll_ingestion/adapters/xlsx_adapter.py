"""
XLSX payroll source: employee master data and attendance rows from one workbook.

Layout (0-based columns, first non-empty row is the header):

  Employee Details:   0 employee number, 1 last name, 2 first name,
                      3 birthday, 14 rice subsidy, 15 phone allowance,
                      16 clothing allowance, 18 hourly rate
  Attendance Record:  0 employee number, 3 date, 4 log-in, 5 log-out

Cells are read with ``data_only=True`` so formula cells give their cached
values. Rows that cannot be read are logged and skipped. A missing file, a
file that is not a readable workbook, or a missing sheet raises a typed
``SourceError``.
"""

from __future__ import annotations

import zipfile
from collections.abc import Iterator
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from payroll_config.schema import DEFAULT_ATTENDANCE_SHEET, DEFAULT_EMPLOYEE_SHEET
from payroll_kernel.domain.models import AttendanceRecord, ClockValue, EmployeeProfile
from payroll_kernel.domain.values import ZERO, to_decimal
from payroll_kernel.exceptions import (
    SourceFileNotFoundError,
    SourceSheetNotFoundError,
    SourceUnreadableError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("ingestion.xlsx")

DATE_FORMAT = "%m/%d/%Y"

# Employee Details columns
EMP_NUMBER_COL = 0
EMP_LAST_NAME_COL = 1
EMP_FIRST_NAME_COL = 2
EMP_BIRTHDAY_COL = 3
EMP_RICE_SUBSIDY_COL = 14
EMP_PHONE_ALLOWANCE_COL = 15
EMP_CLOTHING_ALLOWANCE_COL = 16
EMP_HOURLY_RATE_COL = 18

# Attendance Record columns
ATT_NUMBER_COL = 0
ATT_DATE_COL = 3
ATT_LOG_IN_COL = 4
ATT_LOG_OUT_COL = 5


def _cell(row: tuple[Any, ...], col_idx: int) -> Any:
    """Cell value by 0-based column; short rows read as empty."""
    if col_idx >= len(row):
        return None
    value = row[col_idx]
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _is_blank(row: tuple[Any, ...]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in row)


def parse_employee_number(value: Any) -> int:
    """Employee numbers arrive as int, whole float (10001.0) or text."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid employee number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != int(value):
            raise ValueError(f"Invalid employee number: {value!r}")
        return int(value)
    return int(str(value).strip())


def parse_cell_date(value: Any) -> date:
    """Date cells arrive as datetime/date or ``MM/DD/YYYY`` text."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    raise ValueError(f"Invalid date: {value!r}")


def parse_cell_amount(value: Any, name: str) -> Decimal:
    """Money cells: blank is zero, text may carry thousands separators."""
    if value is None:
        return ZERO
    if isinstance(value, str):
        value = value.replace(",", "")
    return to_decimal(value, name)


def to_clock_value(value: Any) -> ClockValue:
    """Normalize a punch cell for the evaluator; it does the strict parsing."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    return str(value)


class WorkbookPayrollSource:
    """
    Employee directory and attendance source backed by an .xlsx workbook.

    The workbook is read once, on first use, and the parsed rows are kept
    for the lifetime of the source. Both sheets must exist.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        employee_sheet: str = DEFAULT_EMPLOYEE_SHEET,
        attendance_sheet: str = DEFAULT_ATTENDANCE_SHEET,
    ):
        self.path = Path(path)
        self.employee_sheet = employee_sheet
        self.attendance_sheet = attendance_sheet
        if not self.path.is_file():
            logger.error("workbook_not_found", extra={"path": str(self.path)})
            raise SourceFileNotFoundError(str(self.path))
        self._employee_rows: tuple[tuple[Any, ...], ...] | None = None
        self._attendance: tuple[AttendanceRecord, ...] | None = None

    # ------------------------------------------------------------------
    # Workbook access
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if self._employee_rows is not None:
            return
        try:
            wb = openpyxl.load_workbook(self.path, read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, OSError) as e:
            logger.error(
                "workbook_unreadable",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise SourceUnreadableError(str(self.path), str(e)) from e
        try:
            for sheet_name in (self.employee_sheet, self.attendance_sheet):
                if sheet_name not in wb.sheetnames:
                    logger.error(
                        "workbook_sheet_not_found",
                        extra={"path": str(self.path), "sheet": sheet_name},
                    )
                    raise SourceSheetNotFoundError(str(self.path), sheet_name)
            employee_rows = tuple(self._data_rows(wb[self.employee_sheet]))
            attendance_rows = tuple(self._data_rows(wb[self.attendance_sheet]))
        finally:
            wb.close()

        self._employee_rows = employee_rows
        self._attendance = tuple(self._parse_attendance(attendance_rows))
        logger.info(
            "workbook_loaded",
            extra={
                "path": str(self.path),
                "employee_rows": len(employee_rows),
                "attendance_rows": len(self._attendance),
            },
        )

    @staticmethod
    def _data_rows(sheet: Any) -> Iterator[tuple[Any, ...]]:
        """Rows after the header; the header is the first non-blank row."""
        seen_header = False
        for row in sheet.iter_rows(values_only=True):
            if row is None or _is_blank(row):
                continue
            if not seen_header:
                seen_header = True
                continue
            yield row

    def _parse_attendance(
        self,
        rows: tuple[tuple[Any, ...], ...],
    ) -> Iterator[AttendanceRecord]:
        for row_number, row in enumerate(rows, start=2):
            try:
                employee_id = parse_employee_number(_cell(row, ATT_NUMBER_COL))
                work_date = parse_cell_date(_cell(row, ATT_DATE_COL))
            except ValueError as e:
                logger.warning(
                    "attendance_row_unreadable",
                    extra={"sheet": self.attendance_sheet, "row": row_number, "error": str(e)},
                )
                continue
            yield AttendanceRecord(
                employee_id=employee_id,
                work_date=work_date,
                clock_in=to_clock_value(_cell(row, ATT_LOG_IN_COL)),
                clock_out=to_clock_value(_cell(row, ATT_LOG_OUT_COL)),
            )

    # ------------------------------------------------------------------
    # Collaborator protocols
    # ------------------------------------------------------------------

    def lookup_employee(self, employee_id: int) -> EmployeeProfile | None:
        """First Employee Details row with a matching number, or None.

        Raises:
            InvalidHourlyRateError: the matching row has a non-positive rate.
        """
        self._load()
        for row_number, row in enumerate(self._employee_rows, start=2):
            try:
                if parse_employee_number(_cell(row, EMP_NUMBER_COL)) != employee_id:
                    continue
            except ValueError:
                continue
            try:
                birthday = _cell(row, EMP_BIRTHDAY_COL)
                return EmployeeProfile(
                    employee_id=employee_id,
                    first_name=str(_cell(row, EMP_FIRST_NAME_COL) or ""),
                    last_name=str(_cell(row, EMP_LAST_NAME_COL) or ""),
                    birth_date=parse_cell_date(birthday) if birthday is not None else None,
                    hourly_rate=parse_cell_amount(_cell(row, EMP_HOURLY_RATE_COL), "hourly_rate"),
                    rice_subsidy=parse_cell_amount(_cell(row, EMP_RICE_SUBSIDY_COL), "rice_subsidy"),
                    phone_allowance=parse_cell_amount(_cell(row, EMP_PHONE_ALLOWANCE_COL), "phone_allowance"),
                    clothing_allowance=parse_cell_amount(
                        _cell(row, EMP_CLOTHING_ALLOWANCE_COL), "clothing_allowance"
                    ),
                )
            except ValueError as e:
                logger.warning(
                    "employee_row_unreadable",
                    extra={"sheet": self.employee_sheet, "row": row_number, "error": str(e)},
                )
                continue
        return None

    def attendance_for(
        self,
        employee_id: int,
        start: date,
        end: date,
    ) -> tuple[AttendanceRecord, ...]:
        self._load()
        return tuple(
            r for r in self._attendance
            if r.employee_id == employee_id and start <= r.work_date <= end
        )
