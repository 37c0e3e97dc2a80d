"""Abstract base class for LLM providers."""

import logging
from abc import ABC, abstractmethod

from lokieye.schemas import ModelInfo

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for all LLM providers.

    An adapter turns a prompt into the raw JSON text of an analysis. It is
    responsible for:
    - Authentication with the provider
    - Asking for JSON output (typed schema where the vendor supports it)
    - Extracting the text payload from the vendor's response envelope
    - Mapping vendor failures onto ProviderError subclasses

    Parsing the text into an AnalysisResult is done by the orchestrator, so
    every adapter is held to the same validation.
    """

    #: Registry key, set by ``register_provider``
    name: str = ""

    #: Model used when the caller does not pick one
    default_model: str = ""

    def __init__(self, api_key: str, timeout: float | None = None):
        """Initialize provider.

        Args:
            api_key: Provider API key
            timeout: Request timeout in seconds (None = no timeout)
        """
        self.api_key = api_key
        self.timeout = timeout

    @abstractmethod
    async def send_analysis_request(self, prompt: str, model: str) -> str:
        """Send the analysis prompt and return the raw text payload.

        Args:
            prompt: The prompt text to send to the model
            model: Model identifier (provider-specific)

        Returns:
            Text content of the model's answer (expected to be JSON)

        Raises:
            AnalysisError: If the response envelope carries no content
            ProviderError: On API errors
            ProviderTimeoutError: On timeout
            ProviderRateLimitError: On rate limit
            ProviderAuthError: On authentication failure
        """
        pass

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """List models selectable for analysis.

        Returns:
            ModelInfo list

        Raises:
            ProviderError: If listing fails
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the provider."""
        return None

    def __repr__(self) -> str:
        """String representation of the provider."""
        return f"<{self.__class__.__name__} name={self.name!r}>"
