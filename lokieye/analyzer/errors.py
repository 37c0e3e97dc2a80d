"""Exceptions raised while analyzing logs with an LLM provider."""


class AnalysisError(Exception):
    """Base exception for analysis failures.

    Raised when a provider returns empty content, malformed JSON, or JSON
    that does not match the canonical result shape.
    """
    pass


class ProviderError(AnalysisError):
    """Exception raised when the provider call itself fails."""
    pass


class ProviderTimeoutError(ProviderError):
    """Exception raised when provider request times out."""
    pass


class ProviderRateLimitError(ProviderError):
    """Exception raised when provider rate limit is hit."""
    pass


class ProviderAuthError(ProviderError):
    """Exception raised when the API key is missing or rejected."""
    pass
