"""Unit tests for ChatSession."""

import asyncio

import pytest

from mocks import STREAM_ID, STREAMER, VIEWER
from mocks.mock_chain import RecordingChainSubmitter
from mocks.mock_chat_store import InMemoryChatStore
from mocks.mock_llm import ScriptedLLM
from mocks.mock_sink import CollectingSink
from strmly_bot.errors import INTERNAL_ERROR_CODE
from strmly_bot.models.chat import ChatEvent, ChatEventType, ChatMessageDTO
from strmly_bot.models.outcome import OutcomeKind
from strmly_bot.models.payout import PayoutStatus
from strmly_bot.services.chat_session import ChatSession, LoggingOutcomeSink
from strmly_bot.services.donation_pipeline import DonationPipeline

DONATION_TEXT = "@ly bot donate 0.1 eth nice stream"


async def wait_for(condition, timeout: float = 1.0) -> None:
    async with asyncio.timeout(timeout):
        while not condition():
            await asyncio.sleep(0.001)


def insert_event(message: ChatMessageDTO) -> ChatEvent:
    return ChatEvent(
        event_type=ChatEventType.INSERT,
        stream_id=message.stream_id,
        message_id=message.message_id,
        message=message,
    )


class TestPost:
    """Tests for ChatSession.post."""

    @pytest.mark.asyncio
    async def test_message_persisted_before_processing(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
        scripted_llm: ScriptedLLM,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline, sink)

        posted = await session.post(VIEWER, DONATION_TEXT)

        assert posted.message_id in chat_store.messages
        assert scripted_llm.calls == []
        assert session.messages == [posted]

        await session.drain()
        assert [o.kind for o in sink.outcomes] == [OutcomeKind.SUCCESS]

    @pytest.mark.asyncio
    async def test_failed_donation_keeps_message(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
        scripted_llm: ScriptedLLM,
    ) -> None:
        scripted_llm.response = "not json at all"
        session = ChatSession(STREAM_ID, chat_store, pipeline, sink)

        posted = await session.post(VIEWER, DONATION_TEXT)
        await session.drain()

        assert chat_store.messages[posted.message_id].body == DONATION_TEXT
        assert sink.outcomes[0].error_code == "ExtractionParseFailed"

    @pytest.mark.asyncio
    async def test_plain_message_is_no_op(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
        scripted_llm: ScriptedLLM,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline, sink)

        await session.post(VIEWER, "what a play, gg")
        await session.drain()

        assert scripted_llm.calls == []
        assert sink.outcomes[0].kind == OutcomeKind.NO_OP

    @pytest.mark.asyncio
    async def test_reply_to_must_exist_in_stream(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline)
        other = ChatSession("S2", chat_store, pipeline)
        foreign = await other.post(VIEWER, "hello from another stream")

        with pytest.raises(ValueError):
            await session.post(VIEWER, "reply", reply_to="missing")
        with pytest.raises(ValueError):
            await session.post(VIEWER, "reply", reply_to=foreign.message_id)
        assert chat_store.append_calls == 1

    @pytest.mark.asyncio
    async def test_reply_to_same_stream(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline)
        parent = await session.post(STREAMER, "thanks for watching")

        reply = await session.post(VIEWER, "gg", reply_to=parent.message_id)

        assert reply.reply_to == parent.message_id

    @pytest.mark.asyncio
    async def test_invalid_message_not_persisted(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline)

        with pytest.raises(ValueError):
            await session.post(VIEWER, "   ")
        assert chat_store.append_calls == 0


class TestFeed:
    """Tests for the change-feed path."""

    @pytest.mark.asyncio
    async def test_redelivery_pays_once(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
        recording_chain: RecordingChainSubmitter,
        sample_message: ChatMessageDTO,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline, sink)
        feed = asyncio.create_task(session.run())
        await wait_for(lambda: chat_store.subscriber_count == 1)

        await chat_store.append(sample_message)
        chat_store.emit(insert_event(sample_message))
        chat_store.close_feeds()
        await feed
        await session.drain()

        assert len(recording_chain.submissions) == 1
        assert session.messages == [sample_message]

    @pytest.mark.asyncio
    async def test_post_and_feed_pay_once(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        recording_chain: RecordingChainSubmitter,
    ) -> None:
        poster = ChatSession(STREAM_ID, chat_store, pipeline)
        watcher = ChatSession(STREAM_ID, chat_store, pipeline)
        feed = asyncio.create_task(watcher.run())
        await wait_for(lambda: chat_store.subscriber_count == 1)

        await poster.post(VIEWER, DONATION_TEXT)
        chat_store.close_feeds()
        await feed
        await poster.drain()
        await watcher.drain()

        assert len(recording_chain.submissions) == 1

    @pytest.mark.asyncio
    async def test_feed_processing_can_be_disabled(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        scripted_llm: ScriptedLLM,
        sample_message: ChatMessageDTO,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline, process_feed=False)

        session.handle_event(insert_event(sample_message))
        await session.drain()

        assert session.messages == [sample_message]
        assert scripted_llm.calls == []

    @pytest.mark.asyncio
    async def test_delete_removes_from_display(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        plain_message: ChatMessageDTO,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline)
        session.handle_event(insert_event(plain_message))

        session.handle_event(
            ChatEvent(
                event_type=ChatEventType.DELETE,
                stream_id=STREAM_ID,
                message_id=plain_message.message_id,
            )
        )
        await session.drain()

        assert session.messages == []

    @pytest.mark.asyncio
    async def test_other_stream_ignored(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sample_message: ChatMessageDTO,
    ) -> None:
        session = ChatSession("S2", chat_store, pipeline)

        session.handle_event(insert_event(sample_message))

        assert session.messages == []
        assert session.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_history_not_processed(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        scripted_llm: ScriptedLLM,
        sample_message: ChatMessageDTO,
        plain_message: ChatMessageDTO,
    ) -> None:
        await chat_store.append(sample_message)
        await chat_store.append(plain_message)
        session = ChatSession(STREAM_ID, chat_store, pipeline)

        history = await session.load_history(limit=10)
        await session.drain()

        assert [m.message_id for m in history] == ["m1", "m2"]
        assert [m.message_id for m in session.messages] == ["m1", "m2"]
        assert scripted_llm.calls == []

    @pytest.mark.asyncio
    async def test_history_limit(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sample_message: ChatMessageDTO,
        plain_message: ChatMessageDTO,
    ) -> None:
        await chat_store.append(sample_message)
        await chat_store.append(plain_message)
        session = ChatSession(STREAM_ID, chat_store, pipeline)

        history = await session.load_history(limit=1)

        assert [m.message_id for m in history] == ["m2"]

    @pytest.mark.asyncio
    async def test_configured_history_limit_is_the_default(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sample_message: ChatMessageDTO,
        plain_message: ChatMessageDTO,
    ) -> None:
        await chat_store.append(sample_message)
        await chat_store.append(plain_message)
        session = ChatSession(STREAM_ID, chat_store, pipeline, history_limit=1)

        history = await session.load_history()

        assert [m.message_id for m in history] == ["m2"]


class TestIsolation:
    """Tests for failure containment and independence of messages."""

    @pytest.mark.asyncio
    async def test_slow_extraction_does_not_block_posting(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        scripted_llm: ScriptedLLM,
    ) -> None:
        scripted_llm.delay_seconds = 0.2
        session = ChatSession(STREAM_ID, chat_store, pipeline)

        await session.post(VIEWER, DONATION_TEXT)
        second = await session.post(VIEWER, "what a play, gg")

        assert second.message_id in chat_store.messages
        assert session.pending_tasks == 2
        await session.drain()

    @pytest.mark.asyncio
    async def test_crash_becomes_internal_error(
        self,
        chat_store: InMemoryChatStore,
        sink: CollectingSink,
        sample_message: ChatMessageDTO,
    ) -> None:
        class ExplodingPipeline:
            async def process(self, message: ChatMessageDTO) -> None:
                raise RuntimeError("boom")

        session = ChatSession(STREAM_ID, chat_store, ExplodingPipeline(), sink)  # type: ignore[arg-type]

        session.handle_event(insert_event(sample_message))
        await session.drain()

        assert sink.outcomes[0].kind == OutcomeKind.ERROR
        assert sink.outcomes[0].error_code == INTERNAL_ERROR_CODE
        assert session.messages == [sample_message]

    @pytest.mark.asyncio
    async def test_sink_failure_is_contained(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        recording_chain: RecordingChainSubmitter,
    ) -> None:
        class BrokenSink(LoggingOutcomeSink):
            async def publish(self, outcome) -> None:
                raise ConnectionError("ui gone")

        session = ChatSession(STREAM_ID, chat_store, pipeline, BrokenSink())

        await session.post(VIEWER, DONATION_TEXT)
        await session.drain()

        assert len(recording_chain.submissions) == 1

    @pytest.mark.asyncio
    async def test_closed_session_schedules_nothing(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        scripted_llm: ScriptedLLM,
    ) -> None:
        session = ChatSession(STREAM_ID, chat_store, pipeline)
        session.close()

        posted = await session.post(VIEWER, DONATION_TEXT)

        assert posted.message_id in chat_store.messages
        assert session.pending_tasks == 0
        assert scripted_llm.calls == []


class TestConfirmationTracking:
    """Tests for confirmation status notices."""

    @pytest.mark.asyncio
    async def test_confirmed_status_published(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
    ) -> None:
        session = ChatSession(
            STREAM_ID,
            chat_store,
            pipeline,
            sink,
            track_confirmations=True,
            confirmation_poll_seconds=0.01,
            confirmation_timeout_seconds=0.5,
        )

        await session.post(VIEWER, DONATION_TEXT)
        await session.drain()

        assert [o.kind for o in sink.outcomes] == [OutcomeKind.SUCCESS]
        assert [a.status for a in sink.statuses] == [PayoutStatus.CONFIRMED]

    @pytest.mark.asyncio
    async def test_pending_status_not_published(
        self,
        chat_store: InMemoryChatStore,
        pipeline: DonationPipeline,
        sink: CollectingSink,
        recording_chain: RecordingChainSubmitter,
    ) -> None:
        recording_chain._receipt_status = None
        session = ChatSession(
            STREAM_ID,
            chat_store,
            pipeline,
            sink,
            track_confirmations=True,
            confirmation_poll_seconds=0.01,
            confirmation_timeout_seconds=0.05,
        )

        await session.post(VIEWER, DONATION_TEXT)
        await session.drain()

        assert sink.statuses == []
        assert len(recording_chain.submissions) == 1
