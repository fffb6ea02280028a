"""Anthropic text-generation provider for strmly_bot."""

from typing import Any, Self

from anthropic import AsyncAnthropic

from strmly_bot.config import LLMSettings
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.logging import get_logger

__all__ = [
    "AnthropicProvider",
]

logger = get_logger(__name__)


class AnthropicProvider(TextGenerationInterface):
    """Anthropic implementation of the text-generation interface.

    Claude models frequently wrap JSON answers in ```json fences; the
    raw text is returned as-is and cleaned by the response sanitizer.
    """

    config_class = LLMSettings

    def __init__(self, settings: LLMSettings) -> None:
        """Initialize Anthropic provider.

        Args:
            settings: LLM configuration settings
        """
        self._settings = settings
        api_key = settings.api_key.get_secret_value() if settings.api_key else None
        self._client = AsyncAnthropic(api_key=api_key)
        # Default model targets OpenAI; fall back to a Claude model
        self._model = (
            settings.model if "claude" in settings.model.lower() else "claude-sonnet-4-20250514"
        )

    @classmethod
    async def from_config(cls, config: LLMSettings) -> Self:
        """Factory method for StrmlyBot instantiation."""
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return cls(LLMSettings(**config))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    async def generate(self, instructions: str, message_text: str) -> str:
        """Run one message completion and return its text."""
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._settings.max_tokens,
            temperature=self._settings.temperature,
            system=instructions,
            messages=[{"role": "user", "content": message_text}],
        )
        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.debug("anthropic_completion_received", model=self._model, length=len(content))
        return content
