"""Text-generation interface for strmly_bot.

This module defines the Protocol for the external inference service
used to extract donations from chat text.
"""

from typing import ClassVar, Protocol, runtime_checkable

__all__ = [
    "TextGenerationInterface",
]


@runtime_checkable
class TextGenerationInterface(Protocol):
    """Contract for a text-generation provider.

    Implementations return the provider's literal answer; they do not
    parse or validate it.
    """

    config_class: ClassVar[type | None] = None

    async def generate(self, instructions: str, message_text: str) -> str:
        """Run one completion.

        Args:
            instructions: Fixed instruction context (system prompt)
            message_text: User text to analyze

        Returns:
            Raw response text (may be empty or malformed)
        """
        ...
