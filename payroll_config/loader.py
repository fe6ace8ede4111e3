"""
Settings Loader (``payroll_config.loader``).

Responsibility
--------------
Load YAML settings files and parse them into the frozen dataclasses of
``payroll_config.schema`` and ``payroll_kernel.domain.policy``. The single
public entry point for callers is ``payroll_config.get_settings()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass.
* A user file only overrides the keys it names; everything else keeps the
  packaged defaults (``defaults.yaml``).
* Every bad value raises ``InvalidConfigError`` naming the offending key.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad value  -> ``InvalidConfigError``.
"""

from __future__ import annotations

import logging
from datetime import date, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import LoggingSettings, PayrollSettings, SourceSettings
from payroll_kernel.domain.policy import (
    FiscalWindow,
    OvertimeMode,
    OvertimePolicy,
    PayrollPolicy,
    WorkSchedule,
)
from payroll_kernel.exceptions import InvalidConfigError
from payroll_kernel.logging_config import get_logger

logger = get_logger("config.loader")

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def merge_settings(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` on ``base`` without mutating either."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_time(value: Any, key: str) -> time:
    """Parse a clock time from YAML.

    Accepts ``"HH:MM"`` text or an int: YAML 1.1 reads unquoted ``17:00``
    as the base-60 integer 1020, i.e. minutes since midnight.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        hours, minutes = divmod(value, 60)
        if 0 <= hours < 24:
            return time(hours, minutes)
    if isinstance(value, str):
        try:
            hours_text, minutes_text = value.strip().split(":")
            return time(int(hours_text), int(minutes_text))
        except ValueError:
            pass
    raise InvalidConfigError(key, f"expected HH:MM time, got {value!r}")


def parse_date(value: Any, key: str) -> date:
    """Parse a date from YAML (date object or ISO string)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise InvalidConfigError(key, f"expected ISO date, got {value!r}")


def parse_decimal(value: Any, key: str) -> Decimal:
    """Parse a Decimal from YAML, going through ``str`` for floats."""
    if isinstance(value, bool):
        raise InvalidConfigError(key, f"expected a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidConfigError(key, f"expected a number, got {value!r}") from e
    if not result.is_finite():
        raise InvalidConfigError(key, f"expected a finite number, got {value!r}")
    return result


def _optional_path(value: Any) -> Path | None:
    if value in (None, ""):
        return None
    return Path(str(value)).expanduser()


def _subsection(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidConfigError(f"policy.{name}", "must be a mapping")
    return value


def parse_policy(data: dict[str, Any]) -> PayrollPolicy:
    """
    Parse a ``PayrollPolicy`` from the ``policy`` section.

    Raises:
        InvalidConfigError: for unparseable values or violated invariants.
    """
    schedule_data = _subsection(data, "schedule")
    overtime_data = _subsection(data, "overtime")
    window_data = _subsection(data, "fiscal_window")

    mode_raw = str(overtime_data.get("mode", OvertimeMode.FULL_RATE.value))
    try:
        mode = OvertimeMode(mode_raw.strip().lower())
    except ValueError as e:
        valid = ", ".join(m.value for m in OvertimeMode)
        raise InvalidConfigError("policy.overtime.mode", f"must be one of {valid}, got {mode_raw!r}") from e

    try:
        schedule = WorkSchedule(**{
            name: parse_time(value, f"policy.schedule.{name}")
            for name, value in schedule_data.items()
        })
    except (TypeError, ValueError) as e:
        # TypeError: unknown schedule key
        raise InvalidConfigError("policy.schedule", str(e)) from e

    try:
        overtime = OvertimePolicy(
            premium=parse_decimal(overtime_data.get("premium", "0.25"), "policy.overtime.premium"),
            mode=mode,
        )
    except ValueError as e:
        raise InvalidConfigError("policy.overtime.premium", str(e)) from e

    try:
        fiscal_window = FiscalWindow(
            start=parse_date(window_data["start"], "policy.fiscal_window.start"),
            end=parse_date(window_data["end"], "policy.fiscal_window.end"),
        )
    except KeyError as e:
        raise InvalidConfigError(f"policy.fiscal_window.{e.args[0]}", "is required") from e
    except ValueError as e:
        raise InvalidConfigError("policy.fiscal_window", str(e)) from e

    return PayrollPolicy(schedule=schedule, overtime=overtime, fiscal_window=fiscal_window)


def parse_source(data: dict[str, Any]) -> SourceSettings:
    """Parse the ``source`` section."""
    return SourceSettings(
        workbook=_optional_path(data.get("workbook")),
        employee_sheet=str(data.get("employee_sheet", SourceSettings.employee_sheet)),
        attendance_sheet=str(data.get("attendance_sheet", SourceSettings.attendance_sheet)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    """Parse the ``logging`` section; the level must be a stdlib level name."""
    level = str(data.get("level", "INFO")).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise InvalidConfigError("logging.level", f"unknown level {level!r}")
    return LoggingSettings(level=level, log_file=_optional_path(data.get("log_file")))


def parse_settings(data: dict[str, Any]) -> PayrollSettings:
    """Parse a complete settings dict (defaults already merged in)."""
    for section in ("policy", "source", "logging"):
        if not isinstance(data.get(section, {}), dict):
            raise InvalidConfigError(section, "must be a mapping")
    return PayrollSettings(
        policy=parse_policy(data.get("policy", {})),
        source=parse_source(data.get("source", {})),
        logging=parse_logging(data.get("logging", {})),
    )


def load_settings(path: Path | None = None) -> PayrollSettings:
    """Load packaged defaults, overlay ``path`` if given, and parse."""
    data = load_yaml_file(DEFAULTS_PATH)
    if path is not None:
        override = load_yaml_file(path)
        if not isinstance(override, dict):
            raise InvalidConfigError(str(path), "settings file must contain a mapping")
        data = merge_settings(data, override)
    settings = parse_settings(data)
    logger.debug(
        "settings_loaded",
        extra={
            "settings_path": str(path) if path else None,
            "overtime_mode": settings.policy.overtime.mode.value,
            "overtime_premium": settings.policy.overtime.premium,
            "fiscal_start": settings.policy.fiscal_window.start,
            "fiscal_end": settings.policy.fiscal_window.end,
        },
    )
    return settings
