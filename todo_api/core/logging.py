"""
Logging configuration for the todo API.

`LOG_LEVEL` accepts either a bare level name ("DEBUG") or a comma separated
list of directives where `logger=LEVEL` entries target one logger and a bare
entry sets the root level:

    sqlalchemy.engine=INFO,todo_api.http=DEBUG,WARNING

Usage:
    from todo_api.core.logging import configure_logging

    configure_logging(level="INFO", json_logs=False)
    log = logging.getLogger(__name__)
    log.info("message", extra={"todo_id": 1})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Tuple

DEFAULT_ROOT_LEVEL = "INFO"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def parse_level_directives(spec: str) -> Tuple[str, Dict[str, str]]:
    """
    Split a directive string into (root_level, {logger_name: level}).

    Unknown level names are skipped rather than rejected so a typo in the
    environment never prevents the service from starting.
    """
    root = DEFAULT_ROOT_LEVEL
    per_logger: Dict[str, str] = {}
    for raw in spec.split(","):
        directive = raw.strip()
        if not directive:
            continue
        name, sep, level = directive.partition("=")
        if not sep:
            name, level = "", name
        level = level.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            continue
        if name.strip():
            per_logger[name.strip()] = level
        else:
            root = level
    return root, per_logger


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in record.__dict__.items():
        if key not in _RESERVED_ATTRS and not key.startswith("_"):
            payload[key] = value
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(level: str = DEFAULT_ROOT_LEVEL, json_logs: bool = False) -> None:
    """
    Configure root logging plus per-logger levels.

    Parameters
    ----------
    level : str
        Level name or directive list (see module docstring).
    json_logs : bool
        Whether to emit logs as JSON. If False, uses a concise human formatter.
    """
    root_level, per_logger = parse_level_directives(level)
    formatter_name = "json" if json_logs else "console"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter_name,
                }
            },
            "loggers": {
                name: {"level": lvl, "handlers": [], "propagate": True}
                for name, lvl in per_logger.items()
            },
            "root": {
                "handlers": ["default"],
                "level": root_level,
            },
        }
    )


__all__ = ["configure_logging", "parse_level_directives", "JsonFormatter"]
