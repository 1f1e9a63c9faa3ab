"""Concrete provider clients and the factory that selects one by provider identifier."""

from typing import Any, Callable, Dict, Optional

from autopilot.agent_core.base import AIClient
from autopilot.agent_core.exceptions import ConfigurationError
from autopilot.agent_core.logger import get_logger
from autopilot.config import AgentSettings
from .anthropic_api import AnthropicClient, DEFAULT_ANTHROPIC_MODEL
from .gemini import GeminiClient, DEFAULT_GEMINI_MODEL
from .openai_api import OpenAIClient, DEFAULT_OPENAI_MODEL

logger = get_logger(__name__)

DEFAULT_MODELS: Dict[str, str] = {
    "openai": DEFAULT_OPENAI_MODEL,
    "anthropic": DEFAULT_ANTHROPIC_MODEL,
    "gemini": DEFAULT_GEMINI_MODEL,
}

SUPPORTED_PROVIDERS = tuple(DEFAULT_MODELS)


def _build_openai(model: str, settings: AgentSettings, overrides: Dict[str, Any]) -> AIClient:
    overrides.setdefault("base_url", settings.openai_base_url)
    return OpenAIClient(model=model, **overrides)


def _build_anthropic(model: str, settings: AgentSettings, overrides: Dict[str, Any]) -> AIClient:
    return AnthropicClient(model=model, **overrides)


def _build_gemini(model: str, settings: AgentSettings, overrides: Dict[str, Any]) -> AIClient:
    return GeminiClient(model=model, **overrides)


_BUILDERS: Dict[str, Callable[[str, AgentSettings, Dict[str, Any]], AIClient]] = {
    "openai": _build_openai,
    "anthropic": _build_anthropic,
    "gemini": _build_gemini,
}


def default_model(provider: str) -> str:
    """Return the default model for ``provider``.

    Raises:
        ConfigurationError: If the provider is unknown.
    """
    try:
        return DEFAULT_MODELS[provider.lower()]
    except KeyError:
        raise _unknown_provider(provider) from None


def _unknown_provider(provider: str) -> ConfigurationError:
    return ConfigurationError(f"Unknown AI provider: {provider}. Supported: {', '.join(SUPPORTED_PROVIDERS)}")


def create_ai_client(
    provider: str,
    model: Optional[str] = None,
    settings: Optional[AgentSettings] = None,
    **overrides: Any,
) -> AIClient:
    """
    Create the client for ``provider``.

    Args:
        provider: "openai", "anthropic" or "gemini" (case-insensitive).
        model: Model identifier. The provider's default when None.
        settings: Source of API keys and retry policy. Defaults to ``AgentSettings()``
            resolved against an empty environment.
        **overrides: Extra keyword arguments for the client constructor, e.g. an injected
            SDK ``client``/``aclient`` or ``api_key``.

    Returns:
        The provider client.

    Raises:
        ConfigurationError: If the provider is unknown.
        MissingCredentialError: If no API key is available and no SDK client was injected.
    """
    key = provider.lower()
    builder = _BUILDERS.get(key)
    if builder is None:
        raise _unknown_provider(provider)
    resolved_model = model or default_model(key)
    settings = settings or AgentSettings()

    overrides.setdefault("max_retries", settings.max_retries)
    if not ({"client", "aclient"} & overrides.keys()):
        overrides.setdefault("api_key", settings.api_key_for(key))

    logger.debug(f"Creating {key} client for model '{resolved_model}'.")
    return builder(resolved_model, settings, overrides)


__all__ = [
    "create_ai_client",
    "default_model",
    "DEFAULT_MODELS",
    "SUPPORTED_PROVIDERS",
    "OpenAIClient",
    "AnthropicClient",
    "GeminiClient",
]
