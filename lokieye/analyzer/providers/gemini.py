"""Google Gemini provider implementation (schema-native)."""

import logging
from typing import Any

from lokieye.schemas import ModelInfo

from ..errors import (
    AnalysisError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from .base import LLMProvider
from .registry import register_provider

logger = logging.getLogger(__name__)


def build_response_schema(types: Any) -> Any:
    """Typed response schema mirroring AnalysisResult.

    Args:
        types: The ``google.genai.types`` module

    Returns:
        ``types.Schema`` describing the canonical JSON object
    """
    string = types.Schema(type=types.Type.STRING)

    detected_error = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "type": types.Schema(
                type=types.Type.STRING,
                description="Error category (e.g. DB_CONNECTION_ERROR)",
            ),
            "description": types.Schema(
                type=types.Type.STRING,
                description="Short description of the problem",
            ),
            "count": types.Schema(
                type=types.Type.INTEGER,
                description="Number of occurrences",
            ),
        },
        required=["type", "description", "count"],
    )

    recommendation = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": string,
            "action": types.Schema(
                type=types.Type.STRING,
                description="Concrete action to take",
            ),
            "priority": types.Schema(
                type=types.Type.STRING,
                enum=["low", "medium", "high"],
            ),
        },
        required=["title", "action", "priority"],
    )

    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "summary": types.Schema(
                type=types.Type.STRING,
                description="Overall assessment of system health",
            ),
            "detectedErrors": types.Schema(type=types.Type.ARRAY, items=detected_error),
            "recommendations": types.Schema(type=types.Type.ARRAY, items=recommendation),
        },
        required=["summary", "detectedErrors", "recommendations"],
    )


@register_provider("gemini")
class GeminiProvider(LLMProvider):
    """Provider implementation for Google Gemini models.

    Gemini accepts a typed response schema, so field presence is enforced by
    the vendor before the orchestrator validates the result again.
    Requires the ``google-genai`` package.
    """

    default_model = "gemini-3-flash-preview"

    def __init__(self, api_key: str, timeout: float | None = None):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key
            timeout: Request timeout in seconds
        """
        super().__init__(api_key=api_key, timeout=timeout)
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazy initialization of the Gemini client."""
        if self._client is None:
            try:
                from google import genai
                from google.genai import types
            except ImportError as exc:
                raise ImportError(
                    "google-genai package required for Gemini provider. "
                    "Install with: pip install google-genai"
                ) from exc

            http_options = None
            if self.timeout is not None:
                # google-genai expects milliseconds
                http_options = types.HttpOptions(timeout=int(self.timeout * 1000))

            self._client = genai.Client(api_key=self.api_key, http_options=http_options)

        return self._client

    def _build_config(self) -> Any:
        from google.genai import types

        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=build_response_schema(types),
        )

    async def send_analysis_request(self, prompt: str, model: str) -> str:
        """Generate a schema-constrained analysis.

        Args:
            prompt: The prompt text
            model: Model identifier (e.g. "gemini-3-flash-preview")

        Returns:
            JSON text of the response

        Raises:
            AnalysisError: If the response has no text
            ProviderAuthError: If the API key is invalid
            ProviderTimeoutError: If request times out
            ProviderRateLimitError: If rate limit is hit
            ProviderError: For other API errors
        """
        client = self._get_client()
        config = self._build_config()

        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise self._map_error(e) from e

        text = response.text
        if not text:
            raise AnalysisError("Gemini returned an empty analysis")
        return str(text)

    @staticmethod
    def _map_error(e: Exception) -> ProviderError:
        """Map SDK exceptions to our provider exceptions."""
        code = getattr(e, "code", None)
        error_msg = str(e).lower()

        if code in (401, 403) or "api key" in error_msg or "permission" in error_msg:
            return ProviderAuthError(f"Gemini authentication failed: {e}")
        if code == 429 or "resource_exhausted" in error_msg or "rate limit" in error_msg:
            return ProviderRateLimitError(f"Gemini rate limit exceeded: {e}")
        if "timeout" in error_msg or "timed out" in error_msg:
            return ProviderTimeoutError(f"Gemini request timed out: {e}")
        return ProviderError(f"Gemini API error: {e}")

    async def list_models(self) -> list[ModelInfo]:
        """List Gemini models that support content generation.

        Returns:
            ModelInfo list

        Raises:
            ProviderError: If listing fails
        """
        client = self._get_client()

        try:
            pager = await client.aio.models.list()
            models: list[ModelInfo] = []
            async for model in pager:
                actions = getattr(model, "supported_actions", None) or []
                if actions and "generateContent" not in actions:
                    continue
                model_id = (model.name or "").removeprefix("models/")
                if not model_id:
                    continue
                models.append(ModelInfo(id=model_id, name=model.display_name or model_id))
            return models
        except Exception as e:
            raise self._map_error(e) from e

    async def close(self) -> None:
        """Close the SDK's async transport and drop the client."""
        if self._client is None:
            return
        aclose = getattr(self._client.aio, "aclose", None)
        if aclose is not None:
            await aclose()
        self._client = None
