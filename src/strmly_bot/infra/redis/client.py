"""Redis connection for strmly_bot.

Redis is optional. It only makes payout claims visible across bot
processes; a bot without Redis still deduplicates within its own process.
Every operation therefore degrades to "unknown" (None) instead of raising.
"""

from typing import TYPE_CHECKING, Any

from strmly_bot.config import RedisSettings
from strmly_bot.logging import get_logger
from strmly_bot.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from redis.asyncio import Redis

__all__ = [
    "RedisClient",
]

logger = get_logger(__name__)

get_async_redis = lazy_import("redis.asyncio", "Redis", package="redis")


class RedisClient:
    """Async Redis wrapper that never lets an outage reach the pipeline.

    Example:
        async with RedisClient(settings) as client:
            first = await client.set_if_absent("payout:abc", "1", ex=3600)
    """

    def __init__(self, settings: RedisSettings) -> None:
        self._settings = settings
        self._redis: Redis | None = None

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled and self._settings.url is not None

    @property
    def is_connected(self) -> bool:
        return self._redis is not None

    async def connect(self) -> bool:
        """Connect and ping.

        Returns:
            True if Redis is usable, False if disabled or unreachable
        """
        if self._redis is not None:
            return True
        if not self.is_enabled:
            logger.info("redis_disabled", reason="not configured")
            return False

        Redis = get_async_redis()  # noqa: N806
        redis = Redis.from_url(self._settings.url, decode_responses=True)
        try:
            await redis.ping()
        except Exception as e:
            logger.warning(
                "redis_connection_failed",
                error=str(e),
                reason="payout claims stay process-local",
            )
            await redis.aclose()
            return False

        self._redis = redis
        logger.info("connected_to_redis", url=self._settings.url)
        return True

    async def disconnect(self) -> None:
        if self._redis is None:
            return
        await self._redis.aclose()
        self._redis = None
        logger.info("disconnected_from_redis")

    async def set_if_absent(self, key: str, value: str, ex: int | None = None) -> bool | None:
        """SET key value NX [EX ex].

        Returns:
            True if this call created the key, False if it already existed,
            None if Redis could not answer
        """
        if self._redis is None:
            return None
        try:
            return bool(await self._redis.set(key, value, ex=ex, nx=True))
        except Exception as e:
            logger.warning("redis_set_nx_error", key=key, error=str(e))
            return None

    async def __aenter__(self) -> "RedisClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
