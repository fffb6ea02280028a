"""Public DTO models for strmly_bot.

This module exports all public data transfer objects.
"""

from strmly_bot.models.chat import ChatEvent, ChatEventType, ChatMessageDTO
from strmly_bot.models.donation import DonationIntent, ParsedDonation
from strmly_bot.models.outcome import OutcomeKind, PipelineOutcome
from strmly_bot.models.payout import PayoutAttempt, PayoutStatus
from strmly_bot.models.wire import ExtractionRequest, ExtractionResponse, ExtractionResultBody

__all__ = [
    "ChatEvent",
    "ChatEventType",
    "ChatMessageDTO",
    "DonationIntent",
    "ExtractionRequest",
    "ExtractionResponse",
    "ExtractionResultBody",
    "OutcomeKind",
    "ParsedDonation",
    "PayoutAttempt",
    "PayoutStatus",
    "PipelineOutcome",
]
