"""LLM provider registry and public API."""

from .base import LLMProvider
from .chat_completions import ChatCompletionsProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider
from .openrouter import OpenRouterProvider
from .registry import PROVIDERS, default_model_for, get_provider, register_provider

__all__ = [
    # Base classes
    "LLMProvider",
    "ChatCompletionsProvider",

    # Provider implementations
    "GeminiProvider",
    "OpenAIProvider",
    "OpenRouterProvider",

    # Registry
    "PROVIDERS",
    "register_provider",
    "get_provider",
    "default_model_for",
]
