"""Donation pipeline for strmly_bot.

Runs one chat message through mention check, extraction, sanitizing,
validation and payout dispatch, and turns the result into a
PipelineOutcome. Every DonationError is contained here.
"""

import time
from collections.abc import Callable

from strmly_bot.errors import (
    DonationError,
    ExtractionParseFailed,
    ExtractionUnavailable,
    InvalidAmount,
)
from strmly_bot.logging import get_logger
from strmly_bot.models.chat import ChatMessageDTO
from strmly_bot.models.outcome import OutcomeKind, PipelineOutcome
from strmly_bot.models.payout import PayoutAttempt
from strmly_bot.services.dedup_service import DedupService
from strmly_bot.services.extraction_client import ExtractionClient
from strmly_bot.services.intent_validator import IntentValidator, ValidationAction
from strmly_bot.services.mention_detector import MentionDetector
from strmly_bot.services.payout_dispatcher import PayoutDispatcher
from strmly_bot.services.response_sanitizer import ResponseSanitizer

__all__ = [
    "DonationPipeline",
]

logger = get_logger(__name__)

# Failures caused by the extractor are expected noise; the rest drop a real donation
_WARNING_CODES = frozenset(
    {ExtractionUnavailable.code, ExtractionParseFailed.code, InvalidAmount.code}
)


class DonationPipeline:
    """Per-message donation pipeline.

    Stateless apart from the deduplication registry and the optional
    sender cooldown. Safe to run concurrently for different messages.

    Example:
        pipeline = DonationPipeline(detector, client, sanitizer, validator, dispatcher)
        outcome = await pipeline.process(message)
        if outcome.kind == OutcomeKind.SUCCESS:
            print(outcome.tx_hash)
    """

    def __init__(
        self,
        detector: MentionDetector,
        extraction_client: ExtractionClient,
        sanitizer: ResponseSanitizer,
        validator: IntentValidator,
        dispatcher: PayoutDispatcher,
        dedup: DedupService | None = None,
        cooldown_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize pipeline with its stages.

        Args:
            detector: Bot mention detector
            extraction_client: Extraction step
            sanitizer: Response parser
            validator: Intent validator
            dispatcher: Payout dispatcher
            dedup: Payout deduplication (defaults to process-local)
            cooldown_seconds: Minimum delay between extractions per sender (0 = off)
            clock: Monotonic clock, injectable for tests
        """
        self._detector = detector
        self._extraction = extraction_client
        self._sanitizer = sanitizer
        self._validator = validator
        self._dispatcher = dispatcher
        self._dedup = dedup or DedupService()
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._last_extraction: dict[str, float] = {}

    @property
    def dispatcher(self) -> PayoutDispatcher:
        return self._dispatcher

    async def process(self, message: ChatMessageDTO) -> PipelineOutcome:
        """Process one persisted chat message.

        Args:
            message: Message already appended to chat storage

        Returns:
            PipelineOutcome (never raises DonationError)
        """
        mention = self._detector.detect(message.body)
        if not mention.mentioned:
            return self._outcome(message, OutcomeKind.NO_OP)

        log = logger.bind(message_id=message.message_id, stream_id=message.stream_id)

        if not await self._dedup.claim(message.stream_id, message.message_id):
            return self._outcome(message, OutcomeKind.NO_OP, detail="duplicate")

        if self._on_cooldown(message.sender_address):
            log.info("donation_sender_on_cooldown", sender=message.sender_address)
            return self._outcome(message, OutcomeKind.NO_OP, detail="cooldown")

        log.info("donation_mention_detected")
        try:
            raw = await self._extraction.extract(mention.body)
            parsed = self._sanitizer.parse(raw)
            result = self._validator.validate(parsed, message.message_id, message.sender_address)

            if result.action == ValidationAction.NO_DONATION:
                log.info("no_donation_detected")
                return self._outcome(message, OutcomeKind.NO_DONATION, amount=result.intent.amount)

            attempt = await self._dispatcher.dispatch(result.intent, message.stream_id)
        except DonationError as e:
            if e.code in _WARNING_CODES:
                log.warning("donation_failed", error_code=e.code, error=e.detail)
            else:
                log.error("donation_failed", error_code=e.code, error=e.detail)
            return self._outcome(
                message,
                OutcomeKind.ERROR,
                error_code=e.code,
                detail=e.detail,
            )

        return self._success(message, attempt)

    async def track_confirmation(
        self,
        attempt: PayoutAttempt,
        poll_seconds: float = 2.0,
        timeout_seconds: float = 120.0,
    ) -> PayoutAttempt:
        """Best-effort confirmation tracking of a submitted payout."""
        return await self._dispatcher.track_confirmation(attempt, poll_seconds, timeout_seconds)

    def _on_cooldown(self, sender_address: str) -> bool:
        if self._cooldown <= 0:
            return False
        now = self._clock()
        last = self._last_extraction.get(sender_address)
        if last is not None and now - last < self._cooldown:
            return True
        self._last_extraction[sender_address] = now
        return False

    @staticmethod
    def _outcome(
        message: ChatMessageDTO,
        kind: OutcomeKind,
        **fields: object,
    ) -> PipelineOutcome:
        return PipelineOutcome(
            kind=kind,
            message_id=message.message_id,
            stream_id=message.stream_id,
            **fields,
        )

    @staticmethod
    def _success(message: ChatMessageDTO, attempt: PayoutAttempt) -> PipelineOutcome:
        return PipelineOutcome(
            kind=OutcomeKind.SUCCESS,
            message_id=message.message_id,
            stream_id=message.stream_id,
            amount=attempt.intent.amount,
            recipient_address=attempt.recipient_address,
            tx_hash=attempt.tx_hash,
            payout=attempt,
        )
