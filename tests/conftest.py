"""Shared test fixtures for strmly_bot.

This module provides pytest fixtures used across all tests.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from mocks import STREAM_ID, STREAMER, VIEWER
from mocks.mock_chain import RecordingChainSubmitter, StaticDirectory
from mocks.mock_chat_store import InMemoryChatStore
from mocks.mock_llm import ScriptedLLM
from mocks.mock_sink import CollectingSink
from strmly_bot.models.chat import ChatMessageDTO
from strmly_bot.models.donation import DonationIntent, ParsedDonation
from strmly_bot.services.dedup_service import DedupService
from strmly_bot.services.donation_pipeline import DonationPipeline
from strmly_bot.services.extraction_client import ExtractionClient
from strmly_bot.services.intent_validator import IntentValidator
from strmly_bot.services.mention_detector import MentionDetector
from strmly_bot.services.payout_dispatcher import PayoutDispatcher
from strmly_bot.services.response_sanitizer import ResponseSanitizer


# Mock fixtures
@pytest.fixture
def mock_llm() -> AsyncMock:
    """Create mock text-generation interface."""
    llm = AsyncMock()
    llm.generate.return_value = '{"amount": 0.1, "message": "nice stream"}'
    return llm


@pytest.fixture
def mock_directory() -> AsyncMock:
    """Create mock stream directory."""
    directory = AsyncMock()
    directory.lookup_owner.return_value = STREAMER
    return directory


@pytest.fixture
def mock_chain() -> AsyncMock:
    """Create mock chain submitter."""
    chain = AsyncMock()
    chain.submit.return_value = "0xtx1"
    chain.get_receipt_status.return_value = True
    return chain


# Fakes
@pytest.fixture
def chat_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def scripted_llm() -> ScriptedLLM:
    return ScriptedLLM('{"amount": 0.1, "message": "nice stream"}')


@pytest.fixture
def recording_chain() -> RecordingChainSubmitter:
    return RecordingChainSubmitter()


@pytest.fixture
def directory() -> StaticDirectory:
    return StaticDirectory({STREAM_ID: STREAMER})


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def pipeline(
    scripted_llm: ScriptedLLM,
    directory: StaticDirectory,
    recording_chain: RecordingChainSubmitter,
) -> DonationPipeline:
    """Pipeline wired with in-memory fakes."""
    return DonationPipeline(
        detector=MentionDetector("@ly bot"),
        extraction_client=ExtractionClient(scripted_llm, timeout_seconds=1.0),
        sanitizer=ResponseSanitizer(),
        validator=IntentValidator(),
        dispatcher=PayoutDispatcher(directory, recording_chain, timeout_seconds=1.0),
        dedup=DedupService(),
    )


# Sample data fixtures
@pytest.fixture
def sample_message() -> ChatMessageDTO:
    """Create sample donation chat message."""
    return ChatMessageDTO(
        message_id="m1",
        stream_id=STREAM_ID,
        sender_address=VIEWER,
        body="@ly bot donate 0.1 eth nice stream",
        created_on=1704067200,
    )


@pytest.fixture
def plain_message() -> ChatMessageDTO:
    """Create sample chat message without a bot mention."""
    return ChatMessageDTO(
        message_id="m2",
        stream_id=STREAM_ID,
        sender_address=VIEWER,
        body="what a play, gg",
        created_on=1704067201,
    )


@pytest.fixture
def sample_intent() -> DonationIntent:
    return DonationIntent(
        amount=Decimal("0.1"),
        message="nice stream",
        source_message_id="m1",
        donor_address=VIEWER,
    )


@pytest.fixture
def sample_parsed() -> ParsedDonation:
    return ParsedDonation(amount=Decimal("0.05"), message="gg")
