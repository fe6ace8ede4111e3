"""
Typed Exception Hierarchy for the Payroll Kernel.

Every error has a typed class, a machine-readable ``code`` class attribute,
and carries its context as attributes rather than only in the message.
Callers catch by type and report by ``code``:

    try:
        profile = directory.lookup_employee(employee_id)
    except InvalidHourlyRateError as e:
        outcome_error(code=e.code, employee_id=e.employee_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- InputError
    |   +-- EmployeeNotFoundError
    |   +-- InvalidEmployeeNumberError
    |   +-- InvalidMonthError
    |
    +-- AttendanceError
    |   +-- InvalidClockTimeError
    |   +-- ClockOutBeforeClockInError
    |
    +-- PolicyError
    |   +-- InvalidHourlyRateError
    |   +-- InvalidGrossSalaryError
    |
    +-- SourceError
    |   +-- SourceFileNotFoundError
    |   +-- SourceSheetNotFoundError
    |   +-- SourceUnreadableError
    |
    +-- ConfigError
        +-- InvalidConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                        | When Raised
------------|-----------------------------|-------------------------------------
Input       | EMPLOYEE_NOT_FOUND          | No profile for the employee number
            | INVALID_EMPLOYEE_NUMBER     | Employee number text is not numeric
            | INVALID_MONTH               | Not a full English month name
------------|-----------------------------|-------------------------------------
Attendance  | INVALID_CLOCK_TIME          | Clock value is not HH:MM
            | CLOCK_OUT_BEFORE_CLOCK_IN   | Log-out earlier than log-in
------------|-----------------------------|-------------------------------------
Policy      | INVALID_HOURLY_RATE         | Hourly rate is zero or negative
            | INVALID_GROSS_SALARY        | Gross salary is zero or negative
------------|-----------------------------|-------------------------------------
Source      | SOURCE_FILE_NOT_FOUND       | Workbook path does not exist
            | SOURCE_SHEET_NOT_FOUND      | Required worksheet is missing
            | SOURCE_UNREADABLE           | File is not a readable workbook
------------|-----------------------------|-------------------------------------
Config      | INVALID_CONFIG              | Settings file has a bad value

Attendance errors never escape the aggregation stage: the evaluator turns
them into a zero-contribution day and a warning.
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Input exceptions


class InputError(PayrollKernelError):
    """Base exception for caller-supplied request errors."""

    code: str = "INPUT_ERROR"


class EmployeeNotFoundError(InputError):
    """No employee profile exists for the given number."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee Number {employee_id} not found.")


class InvalidEmployeeNumberError(InputError):
    """Employee number text could not be read as an integer."""

    code: str = "INVALID_EMPLOYEE_NUMBER"

    def __init__(self, raw_value: str):
        self.raw_value = raw_value
        super().__init__(
            f"Invalid employee number {raw_value!r}. Please enter a numeric value."
        )


class InvalidMonthError(InputError):
    """Month text is not a full calendar month name."""

    code: str = "INVALID_MONTH"

    def __init__(self, raw_value: str):
        self.raw_value = raw_value
        super().__init__(
            f"Invalid month {raw_value!r}. Please enter a full month name (e.g., JANUARY)."
        )


# Attendance exceptions


class AttendanceError(PayrollKernelError):
    """Base exception for row-level attendance data errors."""

    code: str = "ATTENDANCE_ERROR"


class InvalidClockTimeError(AttendanceError):
    """A clock-in or clock-out value is not a valid HH:MM time."""

    code: str = "INVALID_CLOCK_TIME"

    def __init__(self, raw_value: object):
        self.raw_value = raw_value
        super().__init__(f"Invalid time format {raw_value!r}. Expected HH:MM")


class ClockOutBeforeClockInError(AttendanceError):
    """Log-out time is earlier than log-in time on the same day."""

    code: str = "CLOCK_OUT_BEFORE_CLOCK_IN"

    def __init__(self, clock_in: str, clock_out: str):
        self.clock_in = clock_in
        self.clock_out = clock_out
        super().__init__(
            f"Logout ({clock_out}) cannot be before login ({clock_in})"
        )


# Policy exceptions


class PolicyError(PayrollKernelError):
    """Base exception for values the pay policy cannot accept."""

    code: str = "POLICY_ERROR"


class InvalidHourlyRateError(PolicyError):
    """Hourly rate must be strictly positive."""

    code: str = "INVALID_HOURLY_RATE"

    def __init__(self, employee_id: int | None, hourly_rate: object):
        self.employee_id = employee_id
        self.hourly_rate = hourly_rate
        super().__init__(
            f"Invalid hourly rate {hourly_rate} for employee {employee_id}"
        )


class InvalidGrossSalaryError(PolicyError):
    """Gross salary must be strictly positive to compute deductions."""

    code: str = "INVALID_GROSS_SALARY"

    def __init__(self, gross_salary: object):
        self.gross_salary = gross_salary
        super().__init__(f"Invalid gross salary for deductions: {gross_salary}")


# Source exceptions


class SourceError(PayrollKernelError):
    """Base exception for tabular source access errors."""

    code: str = "SOURCE_ERROR"


class SourceFileNotFoundError(SourceError):
    """The configured workbook does not exist."""

    code: str = "SOURCE_FILE_NOT_FOUND"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class SourceSheetNotFoundError(SourceError):
    """A required worksheet is missing from the workbook."""

    code: str = "SOURCE_SHEET_NOT_FOUND"

    def __init__(self, path: str, sheet_name: str):
        self.path = path
        self.sheet_name = sheet_name
        super().__init__(f"{sheet_name} sheet not found in {path}")


class SourceUnreadableError(SourceError):
    """The workbook exists but cannot be opened as an .xlsx file."""

    code: str = "SOURCE_UNREADABLE"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read workbook {path}: {reason}")


# Config exceptions


class ConfigError(PayrollKernelError):
    """Base exception for settings errors."""

    code: str = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """A settings value is missing, malformed or out of range."""

    code: str = "INVALID_CONFIG"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid config value for {key}: {reason}")
