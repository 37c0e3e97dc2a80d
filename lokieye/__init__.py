"""
LokiEye - AI incident summaries for Grafana Loki.

This package fetches logs from a Loki-compatible backend, classifies every
line by severity and asks an LLM provider for a structured incident summary.

Main components:
- cli: Command-line interface
- fetcher: Loki query client and severity classifier
- analyzer: Prompt building, provider adapters and result validation
- schemas: Data models for log entries and analysis results
- utils: Utilities (logging, etc.)

Public API (for use as a library):
"""

from lokieye.analyzer import (
    AnalysisError,
    AnalysisOrchestrator,
    AnalyzerSettings,
    ProviderConfig,
)
from lokieye.fetcher import FetchError, LokiClient, QueryConfig, classify_line
from lokieye.schemas import (
    AnalysisResult,
    DetectedError,
    LogEntry,
    ModelInfo,
    Recommendation,
)

__version__ = "0.1.0"

__all__ = [
    # Schemas
    "LogEntry",
    "AnalysisResult",
    "DetectedError",
    "Recommendation",
    "ModelInfo",
    # Fetcher
    "QueryConfig",
    "LokiClient",
    "FetchError",
    "classify_line",
    # Analyzer
    "ProviderConfig",
    "AnalyzerSettings",
    "AnalysisOrchestrator",
    "AnalysisError",
]
