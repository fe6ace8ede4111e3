"""
payroll_config -- single public entrypoint for payroll settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_settings()``. No other component reads settings files or
    environment variables directly. Engines never import this package;
    callers pass ``settings.policy`` into them.

Resolution order:
    1. Explicit ``path`` argument.
    2. ``PAYROLL_CONFIG`` environment variable.
    3. Packaged defaults only.

Failure modes:
    - ``FileNotFoundError`` -- the named settings file does not exist.
    - ``InvalidConfigError`` -- a value failed parsing or validation.
"""

from __future__ import annotations

import os
from pathlib import Path

from payroll_config.loader import load_settings
from payroll_config.schema import LoggingSettings, PayrollSettings, SourceSettings
from payroll_kernel.logging_config import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "PAYROLL_CONFIG"


def get_settings(path: Path | None = None) -> PayrollSettings:
    """The ONLY public settings entrypoint."""
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)
    settings = load_settings(path)
    logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "settings_path": str(path) if path else "defaults",
            "overtime_mode": settings.policy.overtime.mode.value,
            "fiscal_start": settings.policy.fiscal_window.start,
            "fiscal_end": settings.policy.fiscal_window.end,
        },
    )
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "LoggingSettings",
    "PayrollSettings",
    "SourceSettings",
    "get_settings",
]
