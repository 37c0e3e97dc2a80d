"""OpenAI provider implementation."""

from .chat_completions import ChatCompletionsProvider
from .registry import register_provider


@register_provider("openai")
class OpenAIProvider(ChatCompletionsProvider):
    """Provider implementation for OpenAI chat models.

    Recommended models:
    - gpt-4o-mini (default, cheap and fast)
    - gpt-4o
    """

    endpoint = "https://api.openai.com/v1/chat/completions"
    models_endpoint = "https://api.openai.com/v1/models"
    default_model = "gpt-4o-mini"
