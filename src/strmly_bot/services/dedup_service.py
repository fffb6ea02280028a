"""Payout deduplication service for strmly_bot.

Guarantees at most one payout attempt per chat message, even when the
feed delivers a message twice or both the posting path and the feed
path see it.
"""

from strmly_bot.interfaces.dedup import DedupStoreInterface
from strmly_bot.logging import get_logger
from strmly_bot.utils.hashing import generate_payout_key

__all__ = [
    "DedupService",
    "InMemoryDedupStore",
]

logger = get_logger(__name__)


class InMemoryDedupStore(DedupStoreInterface):
    """Process-local claim registry.

    Safe within one event loop: the check-and-add has no await point.
    """

    def __init__(self) -> None:
        self._claimed: set[str] = set()

    async def claim(self, key: str) -> bool:
        if key in self._claimed:
            return False
        self._claimed.add(key)
        return True

    def __len__(self) -> int:
        return len(self._claimed)


class DedupService:
    """Claims the payout key of a chat message.

    When a shared store (e.g. Redis) is given, a key must be claimed both
    locally and in the shared store; the local claim comes first so that
    concurrent duplicates in this process never reach the network.

    Example:
        dedup = DedupService()
        if await dedup.claim(message.stream_id, message.message_id):
            ...  # first and only attempt for this message
    """

    def __init__(self, shared_store: DedupStoreInterface | None = None) -> None:
        """Initialize service.

        Args:
            shared_store: Optional cross-process store
        """
        self._local = InMemoryDedupStore()
        self._shared = shared_store

    async def claim(self, stream_id: str, message_id: str) -> bool:
        """Claim the payout key for a message.

        Args:
            stream_id: Stream of the message
            message_id: Triggering chat message ID

        Returns:
            True if this is the first claim for the message
        """
        key = generate_payout_key(stream_id, message_id)
        if not await self._local.claim(key):
            logger.info("duplicate_message_ignored", message_id=message_id, scope="local")
            return False
        if self._shared is not None and not await self._shared.claim(key):
            logger.info("duplicate_message_ignored", message_id=message_id, scope="shared")
            return False
        return True
