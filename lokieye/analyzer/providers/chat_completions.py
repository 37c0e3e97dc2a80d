"""OpenAI-compatible chat completions provider base."""

import logging
from typing import Any

import httpx

from lokieye.schemas import ModelInfo

from ..errors import (
    AnalysisError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from .base import LLMProvider

logger = logging.getLogger(__name__)


class ChatCompletionsProvider(LLMProvider):
    """Shared implementation for OpenAI-compatible chat completion APIs.

    These APIs can be asked for a JSON object but do not guarantee any
    particular fields, so the orchestrator validates the shape afterwards.
    Subclasses only set the endpoints and any extra headers.
    """

    #: POST target for chat completions
    endpoint: str = ""

    #: GET target listing models
    models_endpoint: str = ""

    def __init__(self, api_key: str, timeout: float | None = None):
        """Initialize chat completions provider.

        Args:
            api_key: Bearer key for the vendor
            timeout: Request timeout in seconds (None = no timeout)
        """
        super().__init__(api_key=api_key, timeout=timeout)
        self._client: httpx.AsyncClient | None = None

    def extra_headers(self) -> dict[str, str]:
        """Vendor-specific headers added to every request."""
        return {}

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        headers.update(self.extra_headers())
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    def build_payload(self, prompt: str, model: str) -> dict[str, Any]:
        """Build the request body (OpenAI format)."""
        return {
            "model": model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "response_format": {"type": "json_object"},
        }

    async def send_analysis_request(self, prompt: str, model: str) -> str:
        """Request a JSON-object completion.

        Args:
            prompt: The prompt text
            model: Model identifier

        Returns:
            ``choices[0].message.content``

        Raises:
            AnalysisError: If the envelope carries no content
            ProviderAuthError: On 401/403
            ProviderRateLimitError: On 429
            ProviderTimeoutError: If request times out
            ProviderError: For other API errors
        """
        client = self._get_client()

        try:
            response = await client.post(
                self.endpoint,
                json=self.build_payload(prompt, model),
                headers=self._headers(),
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(f"{self.name} request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Cannot reach {self.name} API: {e}") from e

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise AnalysisError(f"{self.name} returned a non-JSON envelope") from e

        return self._extract_content(data)

    def _extract_content(self, data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AnalysisError(
                f"Unexpected {self.name} response format: {str(data)[:200]}"
            ) from e

        if not content:
            raise AnalysisError(f"{self.name} returned an empty analysis")
        return str(content)

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map a non-2xx response onto a provider exception."""
        if response.is_success:
            return

        status = response.status_code
        message = self._vendor_message(response) or f"{self.name} API error ({status})"
        logger.error(f"{self.name} API returned {status}: {message}")

        if status in (401, 403):
            raise ProviderAuthError(f"Authentication failed: {message}")
        if status == 429:
            raise ProviderRateLimitError(f"Rate limit exceeded: {message}")
        raise ProviderError(message)

    @staticmethod
    def _vendor_message(response: httpx.Response) -> str | None:
        """Pull ``error.message`` out of an error body if there is one."""
        try:
            body = response.json()
        except ValueError:
            return response.text.strip() or None

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        return None

    async def list_models(self) -> list[ModelInfo]:
        """List models from the vendor's ``/models`` endpoint.

        Returns:
            ModelInfo list

        Raises:
            ProviderError: If listing fails
        """
        client = self._get_client()

        try:
            response = await client.get(self.models_endpoint, headers=self._headers())
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to list {self.name} models: {e}") from e

        self._raise_for_status(response)

        data = response.json()
        models = data.get("data", []) if isinstance(data, dict) else []
        return [
            ModelInfo(id=model["id"], name=model.get("name") or model["id"])
            for model in models
            if isinstance(model, dict) and model.get("id")
        ]

    async def close(self) -> None:
        """Close the httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None
