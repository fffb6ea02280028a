"""Configuration management for strmly_bot.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "MongoSettings",
    "RedisSettings",
    "LLMSettings",
    "ChainSettings",
    "StrmlyConfig",
]


class MongoSettings(BaseSettings):
    """MongoDB connection settings (chat storage and stream directory)."""

    model_config = SettingsConfigDict(
        env_prefix="STRMLY_MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "strmly"
    collection_prefix: str = ""
    server_selection_timeout_ms: int = 5000


class RedisSettings(BaseSettings):
    """Redis connection settings (optional).

    Used for cross-process payout deduplication. If url is not configured,
    deduplication stays process-local.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRMLY_REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str | None = None
    enabled: bool = True  # Can be explicitly disabled
    dedup_ttl_seconds: int = 7 * 86400


class LLMSettings(BaseSettings):
    """Text-generation provider settings."""

    model_config = SettingsConfigDict(
        env_prefix="STRMLY_LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai"  # "openai" or "anthropic"
    api_key: SecretStr | None = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 256


class ChainSettings(BaseSettings):
    """Chain submission settings.

    Donations are sent with eth_sendTransaction from the chat sender's own
    account, so the node behind rpc_url must manage (sign for) the donor
    accounts. signer_addresses lists those accounts; donors outside the
    list are rejected before any RPC call. An empty list leaves the check
    to the node.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRMLY_CHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    rpc_url: str = "http://localhost:8545"
    contract_address: str | None = None
    signer_addresses: list[str] = Field(default_factory=list)
    donate_selector: str | None = None  # 4-byte selector of donate(address,string), hex
    decimals: int = 18
    request_timeout_seconds: float = 20.0
    confirmation_poll_seconds: float = 2.0
    confirmation_timeout_seconds: float = 120.0


class StrmlyConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = StrmlyConfig()
        handle = config.bot_handle
    """

    model_config = SettingsConfigDict(
        env_prefix="STRMLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Component settings (nested)
    mongo: MongoSettings = MongoSettings()
    redis: RedisSettings = RedisSettings()
    llm: LLMSettings = LLMSettings()
    chain: ChainSettings = ChainSettings()

    # Mention detection
    bot_handle: str = "@ly bot"

    # Step bounds
    extraction_timeout_seconds: float = 15.0
    dispatch_timeout_seconds: float = 30.0

    # Anti-spam (0 disables)
    sender_cooldown_seconds: float = 0.0

    # Chat session
    history_limit: int = 50
    process_feed: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def redis_enabled(self) -> bool:
        """Check if Redis-backed deduplication is enabled and configured."""
        return self.redis.enabled and self.redis.url is not None
