"""Live chat session for strmly_bot.

Binds the donation pipeline to one stream's chat: messages are persisted
first, displayed in feed order, and only then handed to the pipeline as
independent tasks. Nothing that happens in a pipeline task can affect the
chat log or the feed loop.
"""

import asyncio
import time
import uuid

from strmly_bot.errors import INTERNAL_ERROR_CODE
from strmly_bot.interfaces.chat_store import ChatStoreInterface
from strmly_bot.interfaces.outcome import OutcomeSinkInterface
from strmly_bot.logging import get_logger, message_context
from strmly_bot.models.chat import ChatEvent, ChatEventType, ChatMessageDTO
from strmly_bot.models.outcome import OutcomeKind, PipelineOutcome
from strmly_bot.models.payout import PayoutAttempt, PayoutStatus
from strmly_bot.services.donation_pipeline import DonationPipeline

__all__ = [
    "ChatSession",
    "LoggingOutcomeSink",
]

logger = get_logger(__name__)


class LoggingOutcomeSink(OutcomeSinkInterface):
    """Outcome sink that only logs user notices."""

    async def publish(self, outcome: PipelineOutcome) -> None:
        if outcome.kind == OutcomeKind.NO_OP:
            return
        logger.info(
            "donation_outcome",
            kind=outcome.kind.value,
            message_id=outcome.message_id,
            notice=outcome.notice,
        )

    async def publish_status(self, attempt: PayoutAttempt) -> None:
        logger.info(
            "donation_status",
            message_id=attempt.message_id,
            status=attempt.status.value,
            tx_hash=attempt.tx_hash,
        )


class ChatSession:
    """Chat ingestion and dispatch loop for one live stream.

    Two entry points feed the pipeline:
    - post(): a message written by this session (persist, then process)
    - run(): the stream's change feed (display, then optionally process)

    Both may see the same message; the pipeline's deduplication keeps it
    to one payout.

    Example:
        session = ChatSession("S1", store, pipeline)
        await session.load_history()
        feed = asyncio.create_task(session.run())
        await session.post("0xAAA...", "@ly bot donate 0.1 eth nice stream")
    """

    def __init__(
        self,
        stream_id: str,
        store: ChatStoreInterface,
        pipeline: DonationPipeline,
        sink: OutcomeSinkInterface | None = None,
        *,
        process_feed: bool = True,
        history_limit: int = 50,
        track_confirmations: bool = False,
        confirmation_poll_seconds: float = 2.0,
        confirmation_timeout_seconds: float = 120.0,
    ) -> None:
        """Initialize session.

        Args:
            stream_id: Stream this session follows
            store: Chat storage and feed
            pipeline: Donation pipeline
            sink: Outcome channel (defaults to logging only)
            process_feed: Run the pipeline for messages arriving on the feed
            history_limit: Default number of messages load_history reads
            track_confirmations: Poll receipts of submitted payouts
            confirmation_poll_seconds: Delay between receipt checks
            confirmation_timeout_seconds: Total confirmation window
        """
        self._stream_id = stream_id
        self._store = store
        self._pipeline = pipeline
        self._sink = sink or LoggingOutcomeSink()
        self._process_feed = process_feed
        self._history_limit = history_limit
        self._track_confirmations = track_confirmations
        self._poll_seconds = confirmation_poll_seconds
        self._confirmation_timeout = confirmation_timeout_seconds

        self._messages: dict[str, ChatMessageDTO] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def stream_id(self) -> str:
        return self._stream_id

    @property
    def messages(self) -> list[ChatMessageDTO]:
        """Displayed messages in arrival order."""
        return list(self._messages.values())

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def load_history(self, limit: int | None = None) -> list[ChatMessageDTO]:
        """Load recent messages for display. History is never processed.

        Args:
            limit: Maximum number of messages (defaults to history_limit)

        Returns:
            Loaded messages, oldest first
        """
        history = await self._store.query(
            self._stream_id, self._history_limit if limit is None else limit
        )
        for message in history:
            self._messages.setdefault(message.message_id, message)
        logger.debug("chat_history_loaded", stream_id=self._stream_id, count=len(history))
        return history

    async def post(
        self,
        sender_address: str,
        body: str,
        reply_to: str | None = None,
    ) -> ChatMessageDTO:
        """Persist a new chat message, then schedule donation processing.

        Args:
            sender_address: Account of the sender
            body: Message text
            reply_to: Optional ID of a message in this stream

        Returns:
            The persisted message

        Raises:
            ValueError: If the message is invalid or reply_to is not a
                message of this stream
        """
        if reply_to is not None:
            parent = await self._store.get_message(reply_to)
            if parent is None or parent.stream_id != self._stream_id:
                raise ValueError(f"reply_to {reply_to} is not a message of stream {self._stream_id}")

        message = ChatMessageDTO(
            message_id=uuid.uuid4().hex,
            stream_id=self._stream_id,
            sender_address=sender_address,
            body=body,
            reply_to=reply_to,
            created_on=int(time.time()),
        )

        stored_id = await self._store.append(message)
        if stored_id != message.message_id:
            message = message.model_copy(update={"message_id": stored_id})

        self._remember(message)
        self._schedule(message)
        return message

    async def run(self) -> None:
        """Consume the stream's change feed until it ends or is cancelled."""
        logger.info("chat_feed_started", stream_id=self._stream_id)
        async for event in self._store.subscribe(self._stream_id):
            self.handle_event(event)
        logger.info("chat_feed_ended", stream_id=self._stream_id)

    def handle_event(self, event: ChatEvent) -> None:
        """Apply one feed event to the display log (and the pipeline)."""
        if event.stream_id != self._stream_id:
            return
        if event.event_type == ChatEventType.DELETE:
            if self._messages.pop(event.message_id, None) is not None:
                logger.debug("chat_message_removed", message_id=event.message_id)
            return

        assert event.message is not None
        if self._remember(event.message) and self._process_feed:
            self._schedule(event.message)

    async def drain(self) -> None:
        """Wait for all scheduled pipeline tasks to finish."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending)

    def close(self) -> None:
        """Stop scheduling new work.

        In-flight tasks are abandoned, not cancelled: a payout that already
        reached submission is not rolled back.
        """
        self._closed = True
        if self._tasks:
            logger.info("chat_session_closed", stream_id=self._stream_id, abandoned=len(self._tasks))

    def _remember(self, message: ChatMessageDTO) -> bool:
        if message.message_id in self._messages:
            return False
        self._messages[message.message_id] = message
        return True

    def _schedule(self, message: ChatMessageDTO) -> None:
        if self._closed:
            return
        task = asyncio.create_task(self._process(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process(self, message: ChatMessageDTO) -> None:
        with message_context(message.stream_id, message.message_id):
            try:
                outcome = await self._pipeline.process(message)
            except Exception as e:
                logger.exception("donation_pipeline_crashed")
                outcome = PipelineOutcome(
                    kind=OutcomeKind.ERROR,
                    message_id=message.message_id,
                    stream_id=message.stream_id,
                    error_code=INTERNAL_ERROR_CODE,
                    detail=str(e),
                )

            await self._publish(outcome)

            if self._track_confirmations and outcome.payout is not None:
                attempt = await self._pipeline.track_confirmation(
                    outcome.payout,
                    poll_seconds=self._poll_seconds,
                    timeout_seconds=self._confirmation_timeout,
                )
                if attempt.status != PayoutStatus.SUBMITTED:
                    await self._publish_status(attempt)

    async def _publish(self, outcome: PipelineOutcome) -> None:
        try:
            await self._sink.publish(outcome)
        except Exception:
            logger.exception("outcome_publish_failed", message_id=outcome.message_id)

    async def _publish_status(self, attempt: PayoutAttempt) -> None:
        try:
            await self._sink.publish_status(attempt)
        except Exception:
            logger.exception("status_publish_failed", message_id=attempt.message_id)
