"""Service layer for strmly_bot.

This module exports the donation pipeline stages and the chat session.
"""

from strmly_bot.services.chat_session import ChatSession, LoggingOutcomeSink
from strmly_bot.services.dedup_service import DedupService, InMemoryDedupStore
from strmly_bot.services.donation_pipeline import DonationPipeline
from strmly_bot.services.extraction_client import DONATION_INSTRUCTIONS, ExtractionClient
from strmly_bot.services.intent_validator import IntentValidator, ValidationAction, ValidationResult
from strmly_bot.services.mention_detector import DEFAULT_BOT_HANDLE, MentionDetector, MentionResult
from strmly_bot.services.payout_dispatcher import PayoutDispatcher, to_smallest_unit
from strmly_bot.services.response_sanitizer import ResponseSanitizer, strip_code_fences

__all__ = [
    "DEFAULT_BOT_HANDLE",
    "DONATION_INSTRUCTIONS",
    "ChatSession",
    "DedupService",
    "DonationPipeline",
    "ExtractionClient",
    "InMemoryDedupStore",
    "IntentValidator",
    "LoggingOutcomeSink",
    "MentionDetector",
    "MentionResult",
    "PayoutDispatcher",
    "ResponseSanitizer",
    "ValidationAction",
    "ValidationResult",
    "strip_code_fences",
    "to_smallest_unit",
]
