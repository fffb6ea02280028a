"""Outcome channel interface for strmly_bot."""

from typing import Protocol, runtime_checkable

from strmly_bot.models.outcome import PipelineOutcome
from strmly_bot.models.payout import PayoutAttempt

__all__ = [
    "OutcomeSinkInterface",
]


@runtime_checkable
class OutcomeSinkInterface(Protocol):
    """Contract for delivering per-message outcomes to the UI layer."""

    async def publish(self, outcome: PipelineOutcome) -> None:
        """Deliver the outcome of one processed chat message.

        Args:
            outcome: Outcome of one processed chat message
        """
        ...

    async def publish_status(self, attempt: PayoutAttempt) -> None:
        """Deliver a later status update (confirmed/failed) of a payout.

        Args:
            attempt: Payout attempt after confirmation tracking
        """
        ...
