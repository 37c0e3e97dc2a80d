"""
Data schemas for LokiEye.

This module exposes the public API for all data models shared by the fetcher
and the analyzer.
"""

from .log_entry import (
    LOG_LEVELS,
    AnalysisResult,
    DetectedError,
    LogEntry,
    LogLevel,
    ModelInfo,
    Priority,
    Recommendation,
)

__all__ = [
    "LOG_LEVELS",
    "LogLevel",
    "Priority",
    "LogEntry",
    "DetectedError",
    "Recommendation",
    "AnalysisResult",
    "ModelInfo",
]
