from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

from filterboard.core.exceptions import ConfigError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_ENV = "FILTERBOARD_LOG_FORMAT"
LOG_LEVEL_ENV = "FILTERBOARD_LOG_LEVEL"
LOG_FORMATS = ("json", "plain")


def resolve_log_format(force_format: Optional[str] = None) -> str:
    """
    force_format if given, else $FILTERBOARD_LOG_FORMAT, else "json"

    Raises:
        ConfigError: for anything other than "json" or "plain"
    """
    mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).strip().lower()
    if mode not in LOG_FORMATS:
        raise ConfigError(f"Unknown log format '{mode}'. Expected one of {list(LOG_FORMATS)}")
    return mode


def resolve_log_level(level: Optional[int] = None) -> int:
    if level is not None:
        return level
    name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level '{name}' in ${LOG_LEVEL_ENV}")
    return value


def _formatter(mode: str) -> logging.Formatter:
    if mode == "plain":
        return logging.Formatter(LOG_FORMAT)
    # extra={...} context (column, n_rows, chart_id, ...) lands as top-level keys
    return jsonlogger.JsonFormatter(
        LOG_FORMAT,
        rename_fields={"levelname": "level", "name": "logger"},
    )


def configure_logging(
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure root logger for the dashboard

    Modes:
    - JSON (default), one object per line with the extra={...} fields as keys
    - plain text (local development)

    Level comes from the argument, then $FILTERBOARD_LOG_LEVEL, then INFO.
    Werkzeug's per-request lines are held at WARNING or above, since every
    slider drag posts a callback.
    """
    mode = resolve_log_format(force_format)
    level = resolve_log_level(level)

    logger = logging.getLogger()
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(_formatter(mode))

    # Replace any existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.addHandler(handler)

    logging.getLogger("werkzeug").setLevel(max(level, logging.WARNING))
