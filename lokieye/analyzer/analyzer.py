"""Analysis orchestration across LLM providers."""

import logging
from collections.abc import Sequence
from typing import Literal

from lokieye.schemas import AnalysisResult, LogEntry, ModelInfo

from .config import AnalyzerSettings, ProviderConfig, resolve_api_key
from .errors import AnalysisError, ProviderAuthError
from .prompts import MAX_PROMPT_ENTRIES, build_prompt
from .providers import PROVIDERS, get_provider
from .validators import parse_analysis_result

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "No log entries to analyze."


class AnalysisOrchestrator:
    """Turns a batch of classified logs into one canonical AnalysisResult.

    The pipeline for one call:
    1. Resolve API key and model
    2. Build the prompt from the first entries
    3. Dispatch to the provider adapter registered for the config
    4. Validate the returned text against the canonical shape

    There are no retries; failures propagate as AnalysisError.
    """

    def __init__(self, settings: AnalyzerSettings | None = None):
        """Initialize orchestrator.

        Args:
            settings: Process-wide settings (default key). Read at call
                time; defaults to an empty AnalyzerSettings.
        """
        self.settings = settings if settings is not None else AnalyzerSettings()

    def build_prompt(
        self,
        entries: Sequence[LogEntry],
        language: Literal["en", "ru"] = "en",
    ) -> str:
        """Build the analysis prompt (see :func:`prompts.build_prompt`)."""
        return build_prompt(entries, language=language)

    async def analyze(
        self,
        entries: Sequence[LogEntry],
        config: ProviderConfig,
    ) -> AnalysisResult:
        """Analyze entries with the configured provider.

        Args:
            entries: Classified entries, normally newest first
            config: Provider selection, key and model

        Returns:
            Validated AnalysisResult

        Raises:
            AnalysisError: On provider failure, empty or malformed output
        """
        if not entries:
            logger.info("No entries to analyze, skipping provider call")
            return AnalysisResult(summary=EMPTY_SUMMARY, detected_errors=(), recommendations=())

        if config.provider not in PROVIDERS:
            raise AnalysisError(f"Unknown provider: {config.provider}")

        api_key = resolve_api_key(config, self.settings)
        provider = get_provider(config.provider, api_key=api_key, timeout=config.timeout)
        model = config.model or provider.default_model
        prompt = self.build_prompt(entries, language=config.language)

        logger.info(
            f"Analyzing {min(len(entries), MAX_PROMPT_ENTRIES)} of {len(entries)} entries "
            f"with {config.provider} ({model})"
        )

        try:
            raw = await provider.send_analysis_request(prompt, model)
        finally:
            await provider.close()

        result = parse_analysis_result(raw)
        logger.info(
            f"Analysis complete: {len(result.detected_errors)} error patterns, "
            f"{len(result.recommendations)} recommendations"
        )
        return result

    async def list_available_models(
        self,
        provider: str,
        api_key: str | None = None,
    ) -> list[ModelInfo]:
        """Best-effort list of selectable models.

        Never raises: a missing key, an unknown provider or any failure
        yields an empty list.

        Args:
            provider: Provider name
            api_key: Key to use (Gemini falls back to the default key)

        Returns:
            ModelInfo list, possibly empty
        """
        config = ProviderConfig(provider=provider or "-", api_key=api_key)
        if config.provider not in PROVIDERS:
            logger.warning(f"Cannot list models for unknown provider: {provider}")
            return []

        try:
            key = resolve_api_key(config, self.settings)
        except ProviderAuthError:
            logger.info(f"No API key for {config.provider}, skipping model discovery")
            return []

        adapter = get_provider(config.provider, api_key=key)
        try:
            return await adapter.list_models()
        except Exception as e:
            logger.warning(f"Model discovery failed for {config.provider}: {e}")
            return []
        finally:
            await adapter.close()
