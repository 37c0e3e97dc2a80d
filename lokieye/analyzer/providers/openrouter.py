"""OpenRouter provider implementation."""

import os

from .chat_completions import ChatCompletionsProvider
from .registry import register_provider

DEFAULT_REFERER = "https://github.com/lokieye/lokieye"
APP_TITLE = "LokiEye AI"


@register_provider("openrouter")
class OpenRouterProvider(ChatCompletionsProvider):
    """Provider implementation for the OpenRouter aggregator.

    Same request shape as OpenAI, plus the attribution headers OpenRouter
    uses to credit the calling application. The referer can be changed with
    the OPENROUTER_REFERER environment variable.
    """

    endpoint = "https://openrouter.ai/api/v1/chat/completions"
    models_endpoint = "https://openrouter.ai/api/v1/models"
    default_model = "google/gemini-2.0-flash-lite:preview"

    def extra_headers(self) -> dict[str, str]:
        """Attribution headers."""
        return {
            "HTTP-Referer": os.getenv("OPENROUTER_REFERER", DEFAULT_REFERER),
            "X-Title": APP_TITLE,
        }
