"""
Diagnostics logging for cloudline itself.

cloudline is a logging library, so its own diagnostics must never go through
the loggers it builds for applications. This module gives every cloudline module
a plain stdlib logger that writes JSON to stderr and does not propagate to the
root logger.
"""

import json
import logging
import os
import sys
from typing import Any

DEBUG_ENV_VAR = "CLOUDLINE_DEBUG"


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders library diagnostics as one JSON object per line.

    Fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level name
    - logger: Logger name
    - message: Log message
    - context: Additional context passed via ``extra={"context": {...}}``
    - exception: Formatted traceback, when present
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = record.context

        return json.dumps(log_data, ensure_ascii=False, default=str)


def default_level() -> int:
    """Return DEBUG when ``CLOUDLINE_DEBUG`` is set, WARNING otherwise."""
    return logging.DEBUG if os.getenv(DEBUG_ENV_VAR) else logging.WARNING


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get or create a diagnostics logger.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: derived from CLOUDLINE_DEBUG)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = default_level()

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger
