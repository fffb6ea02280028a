"""Chain submission interface for strmly_bot.

This module defines the Protocol for submitting donation transactions.
"""

from typing import ClassVar, Protocol, runtime_checkable

__all__ = [
    "ChainSubmitterInterface",
]


@runtime_checkable
class ChainSubmitterInterface(Protocol):
    """Contract for the wallet/chain write layer."""

    config_class: ClassVar[type | None] = None

    async def submit(
        self,
        donor_address: str,
        recipient_address: str,
        message: str,
        value_smallest_unit: int,
    ) -> str:
        """Submit one donation transaction.

        Invokes the donation action with (recipient_address, message) and
        transfers value_smallest_unit with it. The transaction is sent from
        donor_address and from no other account.

        Args:
            donor_address: Account that pays (the chat message sender)
            recipient_address: Stream owner account
            message: Message for the streamer
            value_smallest_unit: Value in the chain's smallest unit (wei)

        Returns:
            Transaction hash

        Raises:
            DispatchRejected: If the chain layer rejects the submission or
                cannot send from donor_address
        """
        ...

    async def get_receipt_status(self, tx_hash: str) -> bool | None:
        """Get the execution status of a submitted transaction.

        Args:
            tx_hash: Transaction hash returned by submit

        Returns:
            True if confirmed, False if reverted, None if not mined yet
        """
        ...
