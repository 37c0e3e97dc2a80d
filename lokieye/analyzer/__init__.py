"""LokiEye Analyzer - LLM-powered incident summaries for classified logs.

This module turns a batch of LogEntry objects into one canonical
AnalysisResult, whichever LLM provider answers.

Public API:
    - AnalysisOrchestrator: analyze(), list_available_models()
    - ProviderConfig / AnalyzerSettings: configuration models
    - build_prompt: prompt construction
    - parse_analysis_result: response validation
    - AnalysisError and its ProviderError subclasses
"""

from .analyzer import AnalysisOrchestrator
from .config import AnalyzerSettings, ProviderConfig, ProviderName, resolve_api_key
from .errors import (
    AnalysisError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from .prompts import MAX_PROMPT_ENTRIES, build_prompt
from .providers import LLMProvider, get_provider, register_provider
from .validators import extract_json_from_text, parse_analysis_result

__all__ = [
    "AnalysisOrchestrator",
    "AnalyzerSettings",
    "ProviderConfig",
    "ProviderName",
    "resolve_api_key",
    "AnalysisError",
    "ProviderError",
    "ProviderAuthError",
    "ProviderRateLimitError",
    "ProviderTimeoutError",
    "MAX_PROMPT_ENTRIES",
    "build_prompt",
    "LLMProvider",
    "get_provider",
    "register_provider",
    "extract_json_from_text",
    "parse_analysis_result",
]
