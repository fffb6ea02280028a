"""OpenAI text-generation provider for strmly_bot."""

from typing import Any, Self

from openai import AsyncOpenAI

from strmly_bot.config import LLMSettings
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.logging import get_logger

__all__ = [
    "OpenAIProvider",
]

logger = get_logger(__name__)


class OpenAIProvider(TextGenerationInterface):
    """OpenAI implementation of the text-generation interface.

    Requests JSON-object output, but returns the raw text untouched;
    parsing belongs to the response sanitizer.
    """

    config_class = LLMSettings

    def __init__(self, settings: LLMSettings) -> None:
        """Initialize OpenAI provider.

        Args:
            settings: LLM configuration settings
        """
        self._settings = settings
        api_key = settings.api_key.get_secret_value() if settings.api_key else None
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = settings.model

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
        """Run one chat completion and return its text."""
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": instructions},
                {"role": "user", "content": message_text},
            ],
            response_format={"type": "json_object"},
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
        )
        content = response.choices[0].message.content or ""
        logger.debug("openai_completion_received", model=self._model, length=len(content))
        return content
