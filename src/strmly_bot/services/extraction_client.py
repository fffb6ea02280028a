"""Donation extraction client for strmly_bot.

Wraps the text-generation provider with the fixed donation instructions
and an enforced time bound.
"""

import asyncio

from strmly_bot.errors import ExtractionUnavailable
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.logging import get_logger

__all__ = [
    "DONATION_INSTRUCTIONS",
    "ExtractionClient",
]

logger = get_logger(__name__)

DONATION_INSTRUCTIONS = """You are an AI assistant for a crypto-friendly streaming platform. \
Your task is to analyze a chat message that contains a donation and extract the following information:
- The donation amount in Ethereum (ETH)
- The message for the streamer

Extract ONLY the Ethereum donation amount and the message. Return NOTHING but a JSON object \
in this exact format:
{"amount": number, "message": "string"}

The amount is in whole ETH (0.05 means 0.05 ETH), never in wei.
If you cannot detect a donation amount, set amount to 0.
Make sure the output is a valid JSON object that can be parsed directly."""


class ExtractionClient:
    """Client for the donation extraction step.

    Returns the provider's raw answer. Malformed or empty answers are not
    an error here; the sanitizer owns that. Provider failures and timeouts
    raise ExtractionUnavailable.

    Example:
        client = ExtractionClient(provider, timeout_seconds=15)
        raw = await client.extract("@ly bot donate 0.1 eth nice stream")
    """

    def __init__(
        self,
        llm: TextGenerationInterface,
        timeout_seconds: float = 15.0,
        instructions: str = DONATION_INSTRUCTIONS,
    ) -> None:
        """Initialize client.

        Args:
            llm: Text-generation provider
            timeout_seconds: Upper bound for one extraction call
            instructions: Instruction context sent with every message
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._llm = llm
        self._timeout = timeout_seconds
        self._instructions = instructions

    async def extract(self, message_text: str) -> str:
        """Ask the provider to extract a donation from message_text.

        Args:
            message_text: Chat message body

        Returns:
            Raw provider response

        Raises:
            ExtractionUnavailable: On provider error or timeout
        """
        prompt = f'Here is the chat message: "{message_text}"'
        try:
            async with asyncio.timeout(self._timeout):
                return await self._llm.generate(self._instructions, prompt)
        except TimeoutError as e:
            logger.warning("extraction_timed_out", timeout_seconds=self._timeout)
            raise ExtractionUnavailable(f"extraction timed out after {self._timeout}s") from e
        except Exception as e:
            logger.warning("extraction_call_failed", error=str(e))
            raise ExtractionUnavailable(str(e)) from e
