"""Configuration management for LokiEye Analyzer."""

import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .errors import ProviderAuthError

ProviderName = Literal["gemini", "openai", "openrouter"]

# Only the schema-native provider may fall back to the process-wide key
FALLBACK_KEY_PROVIDERS: frozenset[str] = frozenset({"gemini"})


class ProviderConfig(BaseModel):
    """Per-call selection of the LLM provider.

    The endpoint is looked up from the provider name; only the key and the
    model can be supplied by the caller.
    """

    provider: str = Field(
        default="gemini",
        min_length=1,
        description="Registered provider name (gemini, openai, openrouter, ...)"
    )
    api_key: str | None = Field(
        default=None,
        description="API key for the provider"
    )
    model: str | None = Field(
        default=None,
        description="Model identifier; provider default when omitted"
    )
    language: Literal["en", "ru"] = Field(
        default="en",
        description="Language of the free-text fields in the result"
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (None = no timeout)"
    )

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Provider names are matched case-insensitively."""
        return v.strip().lower()

    @field_validator("api_key", "model")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()


class AnalyzerSettings(BaseModel):
    """Process-wide analyzer settings.

    Passed into the orchestrator explicitly so tests can substitute them.
    """

    default_api_key: str | None = Field(
        default=None,
        description="Fallback key for the schema-native provider"
    )

    @classmethod
    def from_env(cls) -> "AnalyzerSettings":
        """Create settings from environment variables.

        Environment variables:
        - GEMINI_API_KEY: Default key for the Gemini provider
        - API_KEY: Legacy name, used when GEMINI_API_KEY is unset

        Returns:
            Configured AnalyzerSettings instance
        """
        return cls(default_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"))


def resolve_api_key(config: ProviderConfig, settings: AnalyzerSettings) -> str:
    """Pick the API key for a call.

    Args:
        config: Per-call provider configuration
        settings: Process-wide settings

    Returns:
        The explicit key, or the default key for providers that allow it

    Raises:
        ProviderAuthError: If no key is available
    """
    if config.api_key:
        return config.api_key

    if config.provider in FALLBACK_KEY_PROVIDERS and settings.default_api_key:
        return settings.default_api_key

    raise ProviderAuthError(
        f"API key required for provider '{config.provider}'"
    )
