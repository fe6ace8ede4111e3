"""
JSON-lines logging for the payroll packages.

Every logger is a child of ``payroll_kernel``. Each record becomes one JSON
object carrying the event name as ``message``, the request fields bound in
``LogContext`` (request, employee, month, pay period) and any ``extra``
keys. Money stays exact: Decimals are written as strings.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Mapping
from contextvars import ContextVar
from datetime import UTC, date, datetime, time
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any

_ROOT_LOGGER = "payroll_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})
_fields: ContextVar[Mapping[str, str]] = ContextVar("payroll_log_fields", default=_EMPTY)


class LogContext:
    """Request-scoped fields added to every record logged in this context.

    Backed by one ``ContextVar`` holding an immutable mapping, so threads
    and asyncio tasks each see their own request.
    """

    FIELDS = ("request_id", "employee_id", "month", "period")

    @classmethod
    def _merged(cls, values: dict[str, Any]) -> Mapping[str, str]:
        merged = dict(_fields.get())
        for key, val in values.items():
            if key in cls.FIELDS and val is not None:
                merged[key] = str(val)
        return MappingProxyType(merged)

    @classmethod
    def set(
        cls,
        *,
        request_id: str | None = None,
        employee_id: str | int | None = None,
        month: str | None = None,
        period: str | None = None,
    ) -> None:
        """Set fields for the rest of the current context; None leaves a field as is."""
        _fields.set(cls._merged({
            "request_id": request_id,
            "employee_id": employee_id,
            "month": month,
            "period": period,
        }))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_fields.get())

    @classmethod
    def clear(cls) -> None:
        _fields.set(_EMPTY)

    @classmethod
    def bind(cls, **values: Any) -> "_BoundContext":
        """``with LogContext.bind(employee_id=10001): ...`` restores on exit.

        Unknown names and None values are ignored.
        """
        return _BoundContext(values)


class _BoundContext:

    def __init__(self, values: dict[str, Any]):
        self._values = values
        self._token = None

    def __enter__(self) -> type[LogContext]:
        self._token = _fields.set(LogContext._merged(self._values))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        _fields.reset(self._token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

_RESERVED: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_fields.get(),
        }
        for key, val in vars(record).items():
            if key not in _RESERVED and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        # Payroll errors expose .code plus the values they were raised with.
        fields: dict[str, Any] = {"exc_type": type(exc).__name__, "exc_message": str(exc)}
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        for key, val in vars(exc).items():
            if not key.startswith("_") and key != "code":
                fields[f"exc_{key}"] = val
        return fields


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """``get_logger("engines.deductions")`` -> ``payroll_kernel.engines.deductions``."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
    log_file: Path | str | None = None,
) -> None:
    """Attach JSON handlers to the payroll logger tree. Later calls are no-ops.

    Records go to ``handler`` when given, else to ``stream`` (stderr by
    default). ``log_file`` additionally appends every record to that file.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    handlers = [handler if handler is not None else logging.StreamHandler(stream or sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    for h in handlers:
        h.setFormatter(StructuredFormatter())
        root.addHandler(h)


def reset_logging() -> None:
    """Detach and close all payroll handlers so tests can reconfigure."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_ROOT_LOGGER)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.WARNING)
    root.propagate = True
