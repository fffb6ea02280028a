"""Donation models for strmly_bot.

Amounts are Decimal values in whole native-currency units (e.g. ETH).
Conversion to the smallest unit happens only in the payout dispatcher.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

__all__ = [
    "DonationIntent",
    "ParsedDonation",
]


class ParsedDonation(BaseModel, frozen=True):
    """Typed record read from an extraction response, not yet validated."""

    amount: Decimal
    message: str | None = None


class DonationIntent(BaseModel, frozen=True):
    """Validated donation intent derived from one chat message.

    Never persisted; lives only for one message's pipeline run.

    Attributes:
        amount: Non-negative amount in whole native-currency units
        message: Message for the streamer (may be empty)
        source_message_id: Chat message that triggered extraction
        donor_address: Sender of that chat message; the account that pays
        recipient_address: Stream owner, filled in by the dispatcher
    """

    amount: Decimal = Field(ge=0)
    message: str = ""
    source_message_id: str
    donor_address: str | None = None
    recipient_address: str | None = None
