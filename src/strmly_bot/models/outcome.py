"""Pipeline outcome models for strmly_bot.

A PipelineOutcome is emitted for every processed chat message and is the
only contract toward the UI layer.
"""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel

from strmly_bot.models.payout import PayoutAttempt

__all__ = [
    "FAILURE_NOTICE",
    "NO_DONATION_NOTICE",
    "OutcomeKind",
    "PipelineOutcome",
]

FAILURE_NOTICE = "Donation could not be processed."
NO_DONATION_NOTICE = "No donation amount detected in your message."


class OutcomeKind(StrEnum):
    """Kinds of per-message outcomes."""

    NO_OP = "no_op"
    """No mention, duplicate delivery, or sender on cooldown"""

    NO_DONATION = "no_donation"
    """Mention found but the extracted amount is zero (informational)"""

    SUCCESS = "success"
    """Payout submitted; carries the transaction reference"""

    ERROR = "error"
    """Donation path aborted; carries the taxonomy code"""


class PipelineOutcome(BaseModel, frozen=True):
    """Result of processing one chat message."""

    kind: OutcomeKind
    message_id: str
    stream_id: str
    error_code: str | None = None
    detail: str | None = None
    amount: Decimal | None = None
    recipient_address: str | None = None
    tx_hash: str | None = None
    payout: PayoutAttempt | None = None

    @property
    def is_error(self) -> bool:
        return self.kind == OutcomeKind.ERROR

    @property
    def notice(self) -> str | None:
        """User-visible notification text (None for no-op outcomes).

        Error notices are generic; the taxonomy code stays in the logs.
        """
        if self.kind == OutcomeKind.SUCCESS:
            return (
                f"Donated {self.amount} ETH to {self.recipient_address} "
                f"(tx {self.tx_hash})."
            )
        if self.kind == OutcomeKind.NO_DONATION:
            return NO_DONATION_NOTICE
        if self.kind == OutcomeKind.ERROR:
            return FAILURE_NOTICE
        return None
