"""Text-generation provider implementations for strmly_bot."""

from strmly_bot.infra.llm.anthropic_provider import AnthropicProvider
from strmly_bot.infra.llm.openai_provider import OpenAIProvider

__all__ = ["AnthropicProvider", "OpenAIProvider", "provider_class"]

_PROVIDERS = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def provider_class(name: str) -> type[OpenAIProvider] | type[AnthropicProvider]:
    """Get the provider class configured by LLMSettings.provider."""
    try:
        return _PROVIDERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown LLM provider {name!r}; expected one of {sorted(_PROVIDERS)}") from None
