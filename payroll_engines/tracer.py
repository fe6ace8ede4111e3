"""
payroll_engines.tracer -- invocation records and input fingerprints for engines.

Responsibility:
    ``@traced_engine`` logs one ``engine_invocation`` record per call of a
    pure engine: engine name and version, a fingerprint of the inputs that
    determine the result, and the elapsed time. ``attendance_fingerprint``
    hashes the punch rows a pay computation read, so two runs of the same
    month can be checked to have priced the same attendance.

Invariants enforced:
    - Money is fingerprinted by value: ``Decimal("10000")`` and
      ``Decimal("10000.00")`` hash the same.
    - Attendance rows are fingerprinted as a multiset. Weekly totals do not
      depend on row order, so neither does the fingerprint.
    - Frozen dataclasses (periods, policy, records) are hashed field by
      field; times and dates use ISO text.
    - The decorator never consumes a one-shot iterator argument; such
      arguments are fingerprinted by type name only.

Failure modes:
    - Fingerprint fields missing from kwargs hash as ``null``.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import time
from collections.abc import Callable, Iterable
from datetime import date, time as clock_time
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_kernel.domain.models import AttendanceRecord
from payroll_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _canonical(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return "0" if value.is_zero() else str(value.normalize())
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, clock_time)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = ",".join(
            f"{f.name}={_canonical(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({fields})"
    if isinstance(value, dict):
        return "{" + ",".join(f"{k}:{_canonical(v)}" for k, v in sorted(value.items())) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonical(v) for v in value) + "]"
    # Generators and other one-shot iterables are left unread.
    return f"<{type(value).__name__}>"


def _digest(canonical: str) -> str:
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """Hash the named keyword arguments, in the order given."""
    return _digest("|".join(f"{name}={_canonical(kwargs.get(name))}" for name in fingerprint_fields))


def attendance_fingerprint(records: Iterable[AttendanceRecord]) -> str:
    """Order-insensitive hash of the attendance rows a computation used."""
    return _digest("\n".join(sorted(_canonical(r) for r in records)))


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Log an ``engine_invocation`` record around each call of the engine.

    Args:
        engine_name: Engine identifier, e.g. ``"deductions"``.
        engine_version: Bumped whenever the engine's arithmetic changes, so
            an unchanged fingerprint under a new version flags a rule change.
        fingerprint_fields: Keyword argument names hashed into
            ``input_fingerprint``.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = compute_input_fingerprint(fingerprint_fields, kwargs) if fingerprint_fields else ""
            started = time.perf_counter()
            result = func(*args, **kwargs)
            _logger.info(
                "engine_invocation",
                extra={
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return result

        return wrapper

    return decorator
