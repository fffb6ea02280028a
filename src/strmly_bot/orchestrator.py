"""StrmlyBot orchestrator for the live-chat donation bot.

This module provides the main entry point for the strmly_bot package,
wiring collaborators and services for chat sessions and the HTTP
extraction endpoint.
"""

from typing import Any

from strmly_bot.config import StrmlyConfig
from strmly_bot.errors import ExtractionParseFailed, ExtractionUnavailable, InvalidAmount
from strmly_bot.infra.redis.client import RedisClient
from strmly_bot.infra.redis.dedup_store import RedisDedupStore
from strmly_bot.interfaces.chain import ChainSubmitterInterface
from strmly_bot.interfaces.chat_store import ChatStoreInterface
from strmly_bot.interfaces.directory import RecipientDirectoryInterface
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.interfaces.outcome import OutcomeSinkInterface
from strmly_bot.logging import get_logger
from strmly_bot.models.chat import ChatMessageDTO
from strmly_bot.models.outcome import PipelineOutcome
from strmly_bot.models.wire import ExtractionResponse
from strmly_bot.services.chat_session import ChatSession
from strmly_bot.services.dedup_service import DedupService
from strmly_bot.services.donation_pipeline import DonationPipeline
from strmly_bot.services.extraction_client import ExtractionClient
from strmly_bot.services.intent_validator import IntentValidator, ValidationAction
from strmly_bot.services.mention_detector import MentionDetector
from strmly_bot.services.payout_dispatcher import PayoutDispatcher
from strmly_bot.services.response_sanitizer import ResponseSanitizer

__all__ = ["StrmlyBot"]

logger = get_logger(__name__)

NO_AMOUNT_MESSAGE = "No donation amount detected in chat message"
PARSE_FAILED_MESSAGE = "Failed to parse donation information"
INVALID_AMOUNT_MESSAGE = "Invalid donation amount"
UNAVAILABLE_MESSAGE = "Donation extraction service unavailable"


class StrmlyBot:
    """Main orchestrator for the donation bot.

    Accepts implementation classes. Config is loaded from .env automatically.
    For custom implementations, set config_class = None and pass custom_config dict.

    Example:
        async with StrmlyBot(
            chat_store_class=MongoChatStore,
            directory_class=MongoStreamDirectory,
            llm_class=OpenAIProvider,
            chain_class=JsonRpcChainSubmitter,
        ) as bot:
            session = bot.session("S1")
            await session.load_history()
            await session.run()
    """

    def __init__(
        self,
        chat_store_class: type[ChatStoreInterface],
        directory_class: type[RecipientDirectoryInterface],
        llm_class: type[TextGenerationInterface],
        chain_class: type[ChainSubmitterInterface],
        *,
        config: StrmlyConfig | None = None,
        chat_store_custom_config: dict[str, Any] | None = None,
        directory_custom_config: dict[str, Any] | None = None,
        llm_custom_config: dict[str, Any] | None = None,
        chain_custom_config: dict[str, Any] | None = None,
    ) -> None:
        """Initialize StrmlyBot with implementation classes.

        Args:
            chat_store_class: Chat storage implementation class
            directory_class: Stream directory implementation class
            llm_class: Text-generation implementation class
            chain_class: Chain submitter implementation class
            config: Settings (loaded from .env when omitted)
            chat_store_custom_config: Custom config dict if config_class is None
            directory_custom_config: Custom config dict if config_class is None
            llm_custom_config: Custom config dict if config_class is None
            chain_custom_config: Custom config dict if config_class is None
        """
        self._config = config or StrmlyConfig()

        self._chat_store_class = chat_store_class
        self._directory_class = directory_class
        self._llm_class = llm_class
        self._chain_class = chain_class

        self._chat_store_custom_config = chat_store_custom_config
        self._directory_custom_config = directory_custom_config
        self._llm_custom_config = llm_custom_config
        self._chain_custom_config = chain_custom_config

        # Instances (created on connect)
        self._chat_store: ChatStoreInterface | None = None
        self._directory: RecipientDirectoryInterface | None = None
        self._llm: TextGenerationInterface | None = None
        self._chain: ChainSubmitterInterface | None = None
        self._redis: RedisClient | None = None

        # Services (wired on connect)
        self._detector = MentionDetector(self._config.bot_handle)
        self._sanitizer = ResponseSanitizer()
        self._validator = IntentValidator()
        self._extraction_client: ExtractionClient | None = None
        self._pipeline: DonationPipeline | None = None

        self._sessions: list[ChatSession] = []
        self._connected = False

    @property
    def config(self) -> StrmlyConfig:
        return self._config

    async def _instantiate_class(
        self,
        cls: type,
        custom_config: dict[str, Any] | None,
        settings: Any,
    ) -> Any:
        """Instantiate an implementation class.

        If cls.config_class is set, build it from the matching settings.
        If cls.config_class is None, use custom_config dict.
        """
        config_class = getattr(cls, "config_class", None)

        if config_class is None:
            if custom_config is None:
                raise ValueError(
                    f"{cls.__name__} has config_class=None but no custom_config provided"
                )
            return await cls.from_dict(custom_config)
        if custom_config is not None:
            return await cls.from_dict(custom_config)
        if not isinstance(settings, config_class):
            settings = config_class()
        return await cls.from_config(settings)

    async def _connect(self) -> None:
        """Initialize connections and services."""
        if self._connected:
            return

        config = self._config
        self._chat_store = await self._instantiate_class(
            self._chat_store_class, self._chat_store_custom_config, config.mongo
        )
        self._directory = await self._instantiate_class(
            self._directory_class, self._directory_custom_config, config.mongo
        )
        self._llm = await self._instantiate_class(
            self._llm_class, self._llm_custom_config, config.llm
        )
        self._chain = await self._instantiate_class(
            self._chain_class, self._chain_custom_config, config.chain
        )

        shared_store = None
        if config.redis_enabled:
            self._redis = RedisClient(config.redis)
            if await self._redis.connect():
                shared_store = RedisDedupStore(self._redis, ttl=config.redis.dedup_ttl_seconds)

        self._extraction_client = ExtractionClient(
            self._llm, timeout_seconds=config.extraction_timeout_seconds
        )
        self._pipeline = DonationPipeline(
            detector=self._detector,
            extraction_client=self._extraction_client,
            sanitizer=self._sanitizer,
            validator=self._validator,
            dispatcher=PayoutDispatcher(
                self._directory,
                self._chain,
                decimals=config.chain.decimals,
                timeout_seconds=config.dispatch_timeout_seconds,
            ),
            dedup=DedupService(shared_store),
            cooldown_seconds=config.sender_cooldown_seconds,
        )

        self._connected = True
        logger.info("strmly_bot_connected", bot_handle=config.bot_handle)

    async def _disconnect(self) -> None:
        """Close all connections."""
        for session in self._sessions:
            session.close()
        self._sessions.clear()

        for instance in (self._chat_store, self._directory, self._llm, self._chain):
            if instance is not None and hasattr(instance, "close"):
                await instance.close()
        if self._redis is not None:
            await self._redis.disconnect()

        self._connected = False
        logger.info("strmly_bot_disconnected")

    async def __aenter__(self) -> "StrmlyBot":
        """Async context manager entry - connects automatically."""
        await self._connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - disconnects automatically."""
        await self._disconnect()

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError("StrmlyBot not connected. Use 'async with StrmlyBot(...) as bot:'")

    # === CHAT ===

    def session(
        self,
        stream_id: str,
        sink: OutcomeSinkInterface | None = None,
        *,
        track_confirmations: bool = False,
    ) -> ChatSession:
        """Create a chat session bound to one stream."""
        self._ensure_connected()
        assert self._chat_store is not None
        assert self._pipeline is not None

        session = ChatSession(
            stream_id,
            self._chat_store,
            self._pipeline,
            sink,
            process_feed=self._config.process_feed,
            history_limit=self._config.history_limit,
            track_confirmations=track_confirmations,
            confirmation_poll_seconds=self._config.chain.confirmation_poll_seconds,
            confirmation_timeout_seconds=self._config.chain.confirmation_timeout_seconds,
        )
        self._sessions.append(session)
        return session

    async def process_message(self, message: ChatMessageDTO) -> PipelineOutcome:
        """Run one already-persisted message through the donation pipeline."""
        self._ensure_connected()
        assert self._pipeline is not None
        return await self._pipeline.process(message)

    # === HTTP EXTRACTION ===

    async def extract_donation(self, chat_message: str) -> ExtractionResponse:
        """Extract a donation from text, in the HTTP endpoint's terms.

        Extraction only: no mention check, no deduplication, no payout.
        """
        self._ensure_connected()
        assert self._extraction_client is not None

        try:
            raw = await self._extraction_client.extract(chat_message)
            parsed = self._sanitizer.parse(raw)
            result = self._validator.validate(parsed, source_message_id="http")
        except ExtractionUnavailable:
            return ExtractionResponse.failed(UNAVAILABLE_MESSAGE)
        except ExtractionParseFailed as e:
            logger.warning("extraction_parse_failed", error=e.detail)
            return ExtractionResponse.failed(PARSE_FAILED_MESSAGE)
        except InvalidAmount:
            return ExtractionResponse.failed(INVALID_AMOUNT_MESSAGE)

        if result.action == ValidationAction.NO_DONATION:
            return ExtractionResponse.failed(NO_AMOUNT_MESSAGE)
        return ExtractionResponse.success(float(result.intent.amount), result.intent.message)
