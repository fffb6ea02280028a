"""Extraction response sanitizer for strmly_bot.

Turns the provider's raw text into a typed ParsedDonation. Generative
models often wrap JSON in markdown code fences; those are stripped first.
"""

import json
import re
from decimal import Decimal
from typing import Any

from strmly_bot.errors import ExtractionParseFailed
from strmly_bot.logging import get_logger
from strmly_bot.models.donation import ParsedDonation

__all__ = [
    "ResponseSanitizer",
    "strip_code_fences",
]

logger = get_logger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def strip_code_fences(raw: str) -> str:
    """Remove a leading ``` / ```json fence and a trailing ``` fence, then trim."""
    cleaned = _LEADING_FENCE.sub("", raw, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")


class ResponseSanitizer:
    """Parser for extraction responses.

    Expects a JSON object with a numeric ``amount`` (whole native-currency
    units) and an optional string ``message``. Unknown fields are ignored.
    Anything else raises ExtractionParseFailed; a malformed response is
    never read as a zero amount.
    """

    def parse(self, raw: str) -> ParsedDonation:
        """Parse a raw extraction response.

        Args:
            raw: Provider response text

        Returns:
            ParsedDonation with an exact Decimal amount

        Raises:
            ExtractionParseFailed: If the response is not the expected structure
        """
        cleaned = strip_code_fences(raw or "")
        if not cleaned:
            raise ExtractionParseFailed("empty extraction response")

        try:
            payload = json.loads(
                cleaned,
                parse_float=Decimal,
                parse_constant=_reject_constant,
            )
        except ValueError as e:
            logger.debug("extraction_response_not_json", response=cleaned[:200])
            raise ExtractionParseFailed(f"response is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ExtractionParseFailed("response is not a JSON object")

        if "amount" not in payload:
            raise ExtractionParseFailed("response has no amount field")
        amount = payload["amount"]
        # bool is an int subclass in Python; JSON true/false is not a number
        if isinstance(amount, bool) or not isinstance(amount, int | Decimal):
            raise ExtractionParseFailed(f"amount is not a number: {amount!r}")

        message = payload.get("message")
        if message is not None and not isinstance(message, str):
            raise ExtractionParseFailed(f"message is not a string: {message!r}")

        return ParsedDonation(amount=Decimal(amount), message=message)
