"""Redis infrastructure for strmly_bot (optional)."""

from strmly_bot.infra.redis.client import RedisClient
from strmly_bot.infra.redis.dedup_store import RedisDedupStore

__all__ = ["RedisClient", "RedisDedupStore"]
