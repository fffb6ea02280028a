"""Redis-backed payout deduplication store for strmly_bot."""

from strmly_bot.infra.redis.client import RedisClient
from strmly_bot.interfaces.dedup import DedupStoreInterface
from strmly_bot.logging import get_logger

__all__ = [
    "RedisDedupStore",
]

logger = get_logger(__name__)


class RedisDedupStore(DedupStoreInterface):
    """Shared claim registry using SET NX EX.

    If Redis cannot answer, the claim is granted: the process-local claim
    made by DedupService still holds, and dropping a real donation because
    of a cache outage is worse than losing cross-process protection.
    """

    def __init__(
        self,
        redis_client: RedisClient,
        ttl: int = 7 * 86400,
        prefix: str = "payout:",
    ) -> None:
        """Initialize store.

        Args:
            redis_client: Redis client instance
            ttl: Claim lifetime in seconds
            prefix: Key prefix for claims
        """
        self._redis = redis_client
        self._ttl = ttl
        self._prefix = prefix

    async def claim(self, key: str) -> bool:
        result = await self._redis.set_if_absent(f"{self._prefix}{key}", "1", ex=self._ttl)
        if result is None:
            logger.warning("shared_dedup_unavailable", key=key)
            return True
        return result
