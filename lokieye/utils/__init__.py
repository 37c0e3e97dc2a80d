"""Shared utilities for LokiEye."""

from .logger import JSONFormatter, get_logger, set_level

__all__ = [
    "JSONFormatter",
    "get_logger",
    "set_level",
]
