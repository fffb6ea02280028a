"""Unit tests for strmly_bot models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from mocks import STREAMER, VIEWER
from strmly_bot.models.chat import ChatEvent, ChatEventType, ChatMessageDTO, is_account_address
from strmly_bot.models.donation import DonationIntent
from strmly_bot.models.outcome import FAILURE_NOTICE, NO_DONATION_NOTICE, OutcomeKind, PipelineOutcome
from strmly_bot.models.payout import PayoutAttempt, PayoutStatus
from strmly_bot.models.wire import ExtractionRequest, ExtractionResponse


class TestChatMessageDTO:
    """Tests for ChatMessageDTO model."""

    def test_valid_message(self) -> None:
        msg = ChatMessageDTO(
            message_id="m1",
            stream_id="S1",
            sender_address=VIEWER,
            body="hello",
            created_on=1704067200,
        )
        assert msg.reply_to is None
        assert msg.body == "hello"

    def test_blank_body_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessageDTO(
                message_id="m1",
                stream_id="S1",
                sender_address=VIEWER,
                body="   \n",
                created_on=1704067200,
            )

    def test_malformed_sender_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessageDTO(
                message_id="m1",
                stream_id="S1",
                sender_address="0xAAA",
                body="hello",
                created_on=1704067200,
            )

    def test_self_reply_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessageDTO(
                message_id="m1",
                stream_id="S1",
                sender_address=VIEWER,
                body="hello",
                reply_to="m1",
                created_on=1704067200,
            )

    def test_immutable(self, sample_message: ChatMessageDTO) -> None:
        with pytest.raises(ValidationError):
            sample_message.body = "edited"  # type: ignore[misc]

    def test_is_account_address(self) -> None:
        assert is_account_address(VIEWER)
        assert is_account_address("0x" + "AbCdEf0123" * 4)
        assert not is_account_address("0x" + "g" * 40)
        assert not is_account_address("a" * 42)


class TestChatEvent:
    """Tests for ChatEvent model."""

    def test_insert_requires_message(self) -> None:
        with pytest.raises(ValidationError):
            ChatEvent(event_type=ChatEventType.INSERT, stream_id="S1", message_id="m1")

    def test_delete_without_message(self) -> None:
        event = ChatEvent(event_type=ChatEventType.DELETE, stream_id="S1", message_id="m1")
        assert event.message is None


class TestDonationIntent:
    """Tests for DonationIntent model."""

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DonationIntent(amount=Decimal("-1"), source_message_id="m1")

    def test_message_defaults_empty(self) -> None:
        intent = DonationIntent(amount=Decimal("1"), source_message_id="m1")
        assert intent.message == ""
        assert intent.recipient_address is None


class TestPayoutAttempt:
    """Tests for PayoutAttempt model."""

    def _attempt(self, intent: DonationIntent) -> PayoutAttempt:
        return PayoutAttempt(
            intent=intent,
            stream_id="S1",
            donor_address=VIEWER,
            recipient_address=STREAMER,
            value_smallest_unit=10**17,
        )

    def test_starts_pending(self, sample_intent: DonationIntent) -> None:
        attempt = self._attempt(sample_intent)
        assert attempt.status == PayoutStatus.PENDING
        assert attempt.message_id == "m1"

    def test_status_transitions(self, sample_intent: DonationIntent) -> None:
        submitted = self._attempt(sample_intent).with_status(PayoutStatus.SUBMITTED, tx_hash="0x1")
        confirmed = submitted.with_status(PayoutStatus.CONFIRMED)

        assert submitted.tx_hash == "0x1"
        assert confirmed.status == PayoutStatus.CONFIRMED
        assert confirmed.tx_hash == "0x1"

    def test_terminal_state_is_final(self, sample_intent: DonationIntent) -> None:
        failed = self._attempt(sample_intent).with_status(
            PayoutStatus.FAILED, failure_reason="reverted"
        )
        with pytest.raises(ValueError):
            failed.with_status(PayoutStatus.SUBMITTED)

    def test_zero_value_rejected(self, sample_intent: DonationIntent) -> None:
        with pytest.raises(ValidationError):
            PayoutAttempt(
                intent=sample_intent,
                stream_id="S1",
                donor_address=VIEWER,
                recipient_address=STREAMER,
                value_smallest_unit=0,
            )


class TestPipelineOutcome:
    """Tests for PipelineOutcome notices."""

    def test_success_notice_mentions_amount_and_recipient(self) -> None:
        outcome = PipelineOutcome(
            kind=OutcomeKind.SUCCESS,
            message_id="m1",
            stream_id="S1",
            amount=Decimal("0.1"),
            recipient_address=STREAMER,
            tx_hash="0xabc",
        )
        assert "0.1" in outcome.notice
        assert STREAMER in outcome.notice

    def test_error_notice_is_generic(self) -> None:
        outcome = PipelineOutcome(
            kind=OutcomeKind.ERROR,
            message_id="m1",
            stream_id="S1",
            error_code="RecipientUnresolved",
        )
        assert outcome.is_error
        assert outcome.notice == FAILURE_NOTICE
        assert "RecipientUnresolved" not in outcome.notice

    def test_no_donation_and_no_op_notices(self) -> None:
        no_donation = PipelineOutcome(kind=OutcomeKind.NO_DONATION, message_id="m1", stream_id="S1")
        no_op = PipelineOutcome(kind=OutcomeKind.NO_OP, message_id="m1", stream_id="S1")
        assert no_donation.notice == NO_DONATION_NOTICE
        assert not no_donation.is_error
        assert no_op.notice is None


class TestWireModels:
    """Tests for the extraction endpoint JSON shapes."""

    def test_request_uses_camel_case(self) -> None:
        request = ExtractionRequest.model_validate({"chatMessage": "@ly bot 1 eth"})
        assert request.chat_message == "@ly bot 1 eth"

    def test_success_shape(self) -> None:
        response = ExtractionResponse.success(0.1, "nice stream")
        assert response.model_dump(exclude_none=True) == {
            "status": "success",
            "result": {"amount": 0.1, "message": "nice stream"},
        }

    def test_failed_shape(self) -> None:
        response = ExtractionResponse.failed("Failed to parse donation information")
        assert response.model_dump(exclude_none=True) == {
            "status": "failed",
            "message": "Failed to parse donation information",
        }
