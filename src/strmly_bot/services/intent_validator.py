"""Donation intent validation for strmly_bot.

This module enforces the domain rules on a parsed extraction record.
"""

from dataclasses import dataclass
from enum import StrEnum

from strmly_bot.errors import InvalidAmount
from strmly_bot.logging import get_logger
from strmly_bot.models.donation import DonationIntent, ParsedDonation

__all__ = [
    "IntentValidator",
    "ValidationAction",
    "ValidationResult",
]

logger = get_logger(__name__)


class ValidationAction(StrEnum):
    """Actions resulting from intent validation."""

    DISPATCH = "dispatch"
    """amount > 0: resolve recipient and pay out"""

    NO_DONATION = "no_donation"
    """amount == 0: informational outcome, pipeline stops"""


@dataclass
class ValidationResult:
    """Result of intent validation."""

    action: ValidationAction
    intent: DonationIntent


class IntentValidator:
    """Validator for parsed donation records.

    Rules:
    - amount < 0 (or not finite): InvalidAmount
    - amount == 0: NO_DONATION
    - amount > 0: DISPATCH
    - missing message defaults to ""; no length limit here

    Example:
        result = IntentValidator().validate(parsed, message.message_id, message.sender_address)
        if result.action == ValidationAction.DISPATCH:
            attempt = await dispatcher.dispatch(result.intent, stream_id)
    """

    def validate(
        self,
        parsed: ParsedDonation,
        source_message_id: str,
        donor_address: str | None = None,
    ) -> ValidationResult:
        """Validate a parsed record.

        Args:
            parsed: Sanitizer output
            source_message_id: Triggering chat message ID
            donor_address: Sender of the chat message, who pays the donation

        Returns:
            ValidationResult with the action and the intent

        Raises:
            InvalidAmount: If the amount is negative or not finite
        """
        amount = parsed.amount
        if not amount.is_finite() or amount < 0:
            logger.warning(
                "extractor_contract_violation",
                message_id=source_message_id,
                amount=str(amount),
            )
            raise InvalidAmount(f"invalid amount: {amount}")

        intent = DonationIntent(
            amount=amount,
            message=parsed.message or "",
            source_message_id=source_message_id,
            donor_address=donor_address,
        )

        if amount == 0:
            return ValidationResult(action=ValidationAction.NO_DONATION, intent=intent)
        return ValidationResult(action=ValidationAction.DISPATCH, intent=intent)
