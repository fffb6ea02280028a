"""Payout dispatcher for strmly_bot.

This module resolves the stream owner, converts the donation amount to the
chain's smallest unit and submits exactly one donation transaction.
Submission is the last, irrevocable step of the pipeline.
"""

import asyncio
from decimal import Decimal, DecimalException, localcontext

from strmly_bot.errors import AmountPrecisionError, DispatchRejected, RecipientUnresolved
from strmly_bot.interfaces.chain import ChainSubmitterInterface
from strmly_bot.interfaces.directory import RecipientDirectoryInterface
from strmly_bot.logging import get_logger
from strmly_bot.models.chat import is_account_address
from strmly_bot.models.donation import DonationIntent
from strmly_bot.models.payout import PayoutAttempt, PayoutStatus

__all__ = [
    "PayoutDispatcher",
    "to_smallest_unit",
]

logger = get_logger(__name__)


def to_smallest_unit(amount: Decimal, decimals: int = 18) -> int:
    """Convert a whole-unit amount to the chain's smallest unit, exactly.

    Args:
        amount: Amount in whole native-currency units (e.g. ETH)
        decimals: Chain exponent (18 for ETH -> wei)

    Returns:
        Integer amount in the smallest unit

    Raises:
        AmountPrecisionError: If the amount has more fractional digits than
            the chain can represent, or is not finite
    """
    if not amount.is_finite():
        raise AmountPrecisionError(f"amount {amount} is not finite")

    digits = len(amount.as_tuple().digits)
    with localcontext() as ctx:
        # Enough precision that scaling never rounds
        ctx.prec = max(ctx.prec, digits + decimals + 2)
        try:
            scaled = amount.scaleb(decimals)
        except DecimalException as e:
            raise AmountPrecisionError(f"amount {amount} is out of range") from e
        if scaled != scaled.to_integral_value():
            raise AmountPrecisionError(
                f"amount {amount} exceeds {decimals} decimal places of precision"
            )
    return int(scaled)


class PayoutDispatcher:
    """Dispatcher for validated donation intents.

    Example:
        dispatcher = PayoutDispatcher(directory, chain)
        attempt = await dispatcher.dispatch(intent, "S1")
        attempt.status  # PayoutStatus.SUBMITTED
    """

    def __init__(
        self,
        directory: RecipientDirectoryInterface,
        chain: ChainSubmitterInterface,
        decimals: int = 18,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize dispatcher with dependencies.

        Args:
            directory: Stream owner lookup
            chain: Transaction submission layer
            decimals: Chain exponent for unit conversion
            timeout_seconds: Upper bound for the owner lookup and for the
                submission call, each
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._directory = directory
        self._chain = chain
        self._decimals = decimals
        self._timeout = timeout_seconds

    async def resolve_recipient(self, stream_id: str) -> str:
        """Resolve the owner account of a stream.

        Raises:
            RecipientUnresolved: If the stream, its owner, or a valid
                address cannot be found, or the lookup times out
        """
        try:
            async with asyncio.timeout(self._timeout):
                owner = await self._directory.lookup_owner(stream_id)
        except TimeoutError as e:
            raise RecipientUnresolved(
                f"owner lookup for stream {stream_id} timed out after {self._timeout}s"
            ) from e
        if not owner:
            raise RecipientUnresolved(f"no owner found for stream {stream_id}")
        if not is_account_address(owner):
            raise RecipientUnresolved(f"stream {stream_id} owner is malformed: {owner!r}")
        return owner

    async def dispatch(self, intent: DonationIntent, stream_id: str) -> PayoutAttempt:
        """Submit the donation transaction for an intent.

        Returns as soon as the transaction is submitted; confirmation is
        tracked separately (see track_confirmation).

        Args:
            intent: Validated intent with amount > 0
            stream_id: Stream whose owner receives the donation

        Returns:
            PayoutAttempt in SUBMITTED state

        Raises:
            RecipientUnresolved: If the owner cannot be resolved
            AmountPrecisionError: If the amount cannot be converted exactly
            DispatchRejected: If the intent has no donor, or the chain layer
                rejects or times out
        """
        donor = intent.donor_address
        if donor is None:
            raise DispatchRejected("donation has no paying account")

        recipient = await self.resolve_recipient(stream_id)
        value = to_smallest_unit(intent.amount, self._decimals)

        attempt = PayoutAttempt(
            intent=intent.model_copy(update={"recipient_address": recipient}),
            stream_id=stream_id,
            donor_address=donor,
            recipient_address=recipient,
            value_smallest_unit=value,
        )

        try:
            async with asyncio.timeout(self._timeout):
                tx_hash = await self._chain.submit(donor, recipient, intent.message, value)
        except DispatchRejected:
            raise
        except TimeoutError as e:
            raise DispatchRejected(f"submission timed out after {self._timeout}s") from e
        except Exception as e:
            raise DispatchRejected(str(e)) from e

        attempt = attempt.with_status(PayoutStatus.SUBMITTED, tx_hash=tx_hash)
        logger.info(
            "payout_submitted",
            message_id=attempt.message_id,
            stream_id=stream_id,
            donor=donor,
            recipient=recipient,
            value=value,
            tx_hash=tx_hash,
        )
        return attempt

    async def track_confirmation(
        self,
        attempt: PayoutAttempt,
        poll_seconds: float = 2.0,
        timeout_seconds: float = 120.0,
    ) -> PayoutAttempt:
        """Poll for the receipt of a submitted attempt (best effort).

        Never resubmits. If the window elapses or the receipt cannot be
        read, the attempt is returned unchanged in SUBMITTED state.

        Args:
            attempt: Attempt in SUBMITTED state
            poll_seconds: Delay between receipt checks
            timeout_seconds: Total time to wait

        Returns:
            Attempt in CONFIRMED or FAILED state, or unchanged
        """
        if attempt.status != PayoutStatus.SUBMITTED or attempt.tx_hash is None:
            return attempt

        try:
            async with asyncio.timeout(timeout_seconds):
                while True:
                    status = await self._chain.get_receipt_status(attempt.tx_hash)
                    if status is True:
                        logger.info("payout_confirmed", tx_hash=attempt.tx_hash)
                        return attempt.with_status(PayoutStatus.CONFIRMED)
                    if status is False:
                        logger.error("payout_reverted", tx_hash=attempt.tx_hash)
                        return attempt.with_status(
                            PayoutStatus.FAILED, failure_reason="transaction reverted"
                        )
                    await asyncio.sleep(poll_seconds)
        except TimeoutError:
            logger.info("payout_confirmation_pending", tx_hash=attempt.tx_hash)
        except Exception as e:
            logger.warning("payout_receipt_unavailable", tx_hash=attempt.tx_hash, error=str(e))
        return attempt
