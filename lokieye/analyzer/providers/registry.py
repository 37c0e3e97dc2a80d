"""Lookup table of provider adapters keyed by provider name."""

from collections.abc import Callable

from .base import LLMProvider

PROVIDERS: dict[str, type[LLMProvider]] = {}


def register_provider(name: str) -> Callable[[type[LLMProvider]], type[LLMProvider]]:
    """Class decorator that registers a provider adapter under ``name``.

    Example:
        >>> @register_provider("acme")
        ... class AcmeProvider(LLMProvider):
        ...     ...
    """
    def decorator(cls: type[LLMProvider]) -> type[LLMProvider]:
        if name in PROVIDERS and PROVIDERS[name] is not cls:
            raise ValueError(f"Provider already registered: {name}")
        cls.name = name
        PROVIDERS[name] = cls
        return cls

    return decorator


def get_provider(
    name: str,
    api_key: str,
    timeout: float | None = None,
) -> LLMProvider:
    """Create the adapter registered under ``name``.

    Args:
        name: Provider name (e.g. "gemini", "openai", "openrouter")
        api_key: Resolved API key
        timeout: Request timeout in seconds

    Returns:
        Configured provider instance

    Raises:
        ValueError: If no provider is registered under ``name``
    """
    provider_cls = PROVIDERS.get(name.lower())
    if provider_cls is None:
        raise ValueError(
            f"Unknown provider: {name}. "
            f"Supported providers: {', '.join(sorted(PROVIDERS))}"
        )
    return provider_cls(api_key=api_key, timeout=timeout)


def default_model_for(name: str) -> str:
    """Return the default model of a registered provider."""
    provider_cls = PROVIDERS.get(name.lower())
    if provider_cls is None:
        raise ValueError(f"Unknown provider: {name}")
    return provider_cls.default_model
