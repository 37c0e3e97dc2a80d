"""
Structured JSON logging for LokiEye.

Every record is written to stderr as a single JSON object so that the output
of the CLI can itself be shipped to Loki and queried like any other service.
"""

import json
import logging
import os
import sys
from typing import Any

LOG_LEVEL_ENV = "LOKIEYE_LOG_LEVEL"


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders log records as JSON.

    Fields:
    - timestamp: ISO 8601 timestamp
    - level: Log level name
    - logger: Logger name
    - message: Rendered log message
    - context: Value of the ``context`` extra, if given
    - exception: Formatted traceback, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log string
        """
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


def resolve_level(level: int | None = None) -> int:
    """
    Pick the effective level for a new logger.

    An explicit level wins; otherwise ``LOKIEYE_LOG_LEVEL`` (a level name such
    as ``DEBUG``) is consulted, falling back to INFO.
    """
    if level is not None:
        return level

    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    resolved = logging.getLevelName(name) if name else logging.INFO
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get or create a structured JSON logger.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: from LOKIEYE_LOG_LEVEL, else INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    effective = resolve_level(level)
    logger.setLevel(effective)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(effective)
    handler.setFormatter(JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def set_level(level: int) -> None:
    """Change the level of every logger created by :func:`get_logger`."""
    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers:
            if isinstance(handler.formatter, JSONFormatter):
                logger.setLevel(level)
                handler.setLevel(level)
