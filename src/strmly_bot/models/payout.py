"""Payout attempt models for strmly_bot."""

from enum import StrEnum

from pydantic import BaseModel, Field

from strmly_bot.models.donation import DonationIntent

__all__ = [
    "PayoutAttempt",
    "PayoutStatus",
]


class PayoutStatus(StrEnum):
    """Submission status of a payout attempt."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PayoutStatus.CONFIRMED, PayoutStatus.FAILED)


class PayoutAttempt(BaseModel, frozen=True):
    """Record of the single dispatch try for one chat message.

    Status transitions produce new instances via ``with_status``.

    Attributes:
        intent: Snapshot of the validated intent
        stream_id: Stream the donation goes to
        donor_address: Account the transaction is sent from
        recipient_address: Resolved stream owner
        value_smallest_unit: Amount converted to the chain's smallest unit
        status: Current submission status
        tx_hash: Chain transaction reference once submitted
        failure_reason: Reason reported by the chain layer, if failed
    """

    intent: DonationIntent
    stream_id: str
    donor_address: str
    recipient_address: str
    value_smallest_unit: int = Field(gt=0)
    status: PayoutStatus = PayoutStatus.PENDING
    tx_hash: str | None = None
    failure_reason: str | None = None

    @property
    def message_id(self) -> str:
        """Deduplication key: the triggering chat message."""
        return self.intent.source_message_id

    def with_status(
        self,
        status: PayoutStatus,
        *,
        tx_hash: str | None = None,
        failure_reason: str | None = None,
    ) -> "PayoutAttempt":
        """Return a copy moved to ``status``.

        Raises:
            ValueError: If the attempt is already in a terminal state
        """
        if self.status.is_terminal:
            raise ValueError(f"payout for {self.message_id} is already {self.status}")
        update: dict[str, object] = {"status": status}
        if tx_hash is not None:
            update["tx_hash"] = tx_hash
        if failure_reason is not None:
            update["failure_reason"] = failure_reason
        return self.model_copy(update=update)
