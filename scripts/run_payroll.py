#!/usr/bin/env python3
"""
Compute and print the monthly pay statement for one employee.

Reads employee master data and attendance from an .xlsx workbook, runs the
attendance-to-pay engines for the requested month, and prints the statement.
Arguments that are left out are prompted for; an invalid month name is asked
for again.

Usage:
    python3 scripts/run_payroll.py [--employee N] [--month NAME] [options]

Examples:
    # Fully non-interactive
    python3 scripts/run_payroll.py --workbook payroll.xlsx --employee 10001 --month JUNE

    # Workbook from settings, prompt for the rest
    PAYROLL_CONFIG=payroll.yaml python3 scripts/run_payroll.py

    # Also append JSON logs to a file
    python3 scripts/run_payroll.py --workbook payroll.xlsx --log-file payroll_system.log

Exit codes:
    0  statement computed
    1  employee not found, invalid month, month not computable, policy error
    2  bad arguments, bad settings, or unreadable workbook
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

import yaml

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from payroll_config import get_settings  # noqa: E402
from payroll_ingestion.adapters.xlsx_adapter import WorkbookPayrollSource  # noqa: E402
from payroll_kernel.exceptions import (  # noqa: E402
    InputError,
    InvalidConfigError,
    SourceError,
)
from payroll_kernel.logging_config import configure_logging, get_logger  # noqa: E402
from payroll_services import (  # noqa: E402
    PayrollService,
    parse_employee_number,
    parse_month,
    render_statement,
)

logger = get_logger("scripts.run_payroll")

EXIT_OK = 0
EXIT_OUTCOME_FAILED = 1
EXIT_USAGE = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute one employee's monthly pay statement from attendance records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--employee",
        default=None,
        help="Employee number. Prompted for when omitted.",
    )
    parser.add_argument(
        "--month",
        default=None,
        help="Full month name, e.g. JUNE (case-insensitive). Prompted for when omitted.",
    )
    parser.add_argument(
        "--workbook",
        type=Path,
        default=None,
        help="Path to the payroll .xlsx workbook (default: source.workbook from settings).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML overlaid on the packaged defaults (default: $PAYROLL_CONFIG).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append JSON log lines to this file (default: logging.log_file from settings).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level (default: logging.level from settings).",
    )
    return parser.parse_args(argv)


def _prompt_employee(input_fn: Callable[[str], str], out: TextIO) -> int:
    while True:
        raw = input_fn("Enter Employee Number: ")
        try:
            return parse_employee_number(raw)
        except InputError as e:
            print(e, file=out)


def _prompt_month(input_fn: Callable[[str], str], out: TextIO) -> str:
    while True:
        raw = input_fn("Enter Month (e.g., JUNE): ")
        try:
            return parse_month(raw)
        except InputError as e:
            print(e, file=out)


def main(
    argv: Sequence[str] | None = None,
    *,
    input_fn: Callable[[str], str] = input,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    args = _parse_args(argv)

    try:
        settings = get_settings(args.config)
    except (FileNotFoundError, yaml.YAMLError, InvalidConfigError) as e:
        print(f"Error: cannot load settings: {e}", file=err)
        return EXIT_USAGE

    if args.log_level:
        level = logging.getLevelName(args.log_level)
    else:
        level = settings.logging.level_number
    configure_logging(
        level=level,
        stream=err,
        log_file=args.log_file or settings.logging.log_file,
    )

    workbook = args.workbook or settings.source.workbook
    if workbook is None:
        print("Error: no workbook given (use --workbook or source.workbook in settings).", file=err)
        return EXIT_USAGE

    try:
        source = WorkbookPayrollSource(
            workbook,
            employee_sheet=settings.source.employee_sheet,
            attendance_sheet=settings.source.attendance_sheet,
        )
    except SourceError as e:
        print(f"Error: {e}", file=err)
        return EXIT_USAGE

    service = PayrollService(source, source, policy=settings.policy)
    try:
        if args.employee is not None:
            employee_id = parse_employee_number(args.employee)
        else:
            employee_id = _prompt_employee(input_fn, out)
        if args.month is not None:
            month = args.month
        else:
            # Unknown employees stop here, before the month prompt.
            rejected = service.check_employee(employee_id)
            if rejected is not None:
                print(render_statement(rejected), file=out)
                return EXIT_OUTCOME_FAILED
            month = _prompt_month(input_fn, out)
        outcome = service.compute(employee_id, month)
    except InputError as e:
        print(f"Error: {e}", file=err)
        return EXIT_USAGE
    except EOFError:
        print("Error: input closed before employee number and month were given.", file=err)
        return EXIT_USAGE
    except SourceError as e:
        logger.error("workbook_unreadable", extra={"error_code": e.code}, exc_info=True)
        print(f"Error: {e}", file=err)
        return EXIT_USAGE

    print(render_statement(outcome), file=out)
    return EXIT_OK if outcome.is_success else EXIT_OUTCOME_FAILED


if __name__ == "__main__":
    sys.exit(main())
