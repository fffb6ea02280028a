"""MongoDB repositories for strmly_bot.

Chat messages are stored with ``_id`` set to the message ID, so delete
events on the change stream carry the ID in ``documentKey``.
"""

from collections.abc import AsyncIterator
from typing import Any, Self

from strmly_bot.config import MongoSettings
from strmly_bot.infra.mongo.client import MongoClient
from strmly_bot.interfaces.chat_store import ChatStoreInterface
from strmly_bot.interfaces.directory import RecipientDirectoryInterface
from strmly_bot.logging import get_logger
from strmly_bot.models.chat import ChatEvent, ChatEventType, ChatMessageDTO

__all__ = [
    "MongoChatStore",
    "MongoStreamDirectory",
]

logger = get_logger(__name__)


class _MongoRepository:
    """Shared client ownership and factories."""

    config_class = MongoSettings

    def __init__(self, client: MongoClient) -> None:
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Factory method for StrmlyBot instantiation.

        Creates a MongoClient, connects, creates indexes, and returns repository.
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()
        instance = cls(client)
        instance._owns_client = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return await cls.from_config(MongoSettings(**config))

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client and self._client:
            await self._client.disconnect()


class MongoChatStore(_MongoRepository, ChatStoreInterface):
    """MongoDB implementation of ChatStoreInterface.

    The live feed uses change streams, which need a replica set.
    """

    async def append(self, message: ChatMessageDTO) -> str:
        """Insert a chat message (messages are never updated)."""
        await self._client.chat_messages.insert_one(self._message_to_doc(message))
        return message.message_id

    async def subscribe(self, stream_id: str) -> AsyncIterator[ChatEvent]:
        """Follow inserts of a stream and all deletes.

        Delete events only carry the document key, so they cannot be
        filtered by stream; consumers ignore IDs they do not display.

        Raises:
            RuntimeError: If the server cannot serve change streams
        """
        if not await self._client.supports_change_streams():
            raise RuntimeError("live chat feed needs a MongoDB replica set")
        pipeline = [
            {
                "$match": {
                    "$or": [
                        {"operationType": "insert", "fullDocument.stream_id": stream_id},
                        {"operationType": "delete"},
                    ]
                }
            }
        ]
        async with self._client.chat_messages.watch(pipeline) as change_stream:
            async for change in change_stream:
                if change["operationType"] == "insert":
                    message = self._doc_to_message(change["fullDocument"])
                    yield ChatEvent(
                        event_type=ChatEventType.INSERT,
                        stream_id=stream_id,
                        message_id=message.message_id,
                        message=message,
                    )
                else:
                    yield ChatEvent(
                        event_type=ChatEventType.DELETE,
                        stream_id=stream_id,
                        message_id=str(change["documentKey"]["_id"]),
                    )

    async def query(self, stream_id: str, limit: int = 50) -> list[ChatMessageDTO]:
        """Get the most recent messages of a stream, oldest first."""
        cursor = (
            self._client.chat_messages.find({"stream_id": stream_id})
            .sort("created_on", -1)
            .limit(limit)
        )
        messages = [self._doc_to_message(doc) async for doc in cursor]
        messages.reverse()
        return messages

    async def get_message(self, message_id: str) -> ChatMessageDTO | None:
        """Get a message by ID."""
        doc = await self._client.chat_messages.find_one({"_id": message_id})
        return self._doc_to_message(doc) if doc else None

    @staticmethod
    def _message_to_doc(message: ChatMessageDTO) -> dict[str, Any]:
        return {
            "_id": message.message_id,
            "stream_id": message.stream_id,
            "sender_address": message.sender_address,
            "body": message.body,
            "reply_to": message.reply_to,
            "created_on": message.created_on,
        }

    @staticmethod
    def _doc_to_message(doc: dict[str, Any]) -> ChatMessageDTO:
        return ChatMessageDTO(
            message_id=str(doc["_id"]),
            stream_id=doc["stream_id"],
            sender_address=doc["sender_address"],
            body=doc["body"],
            reply_to=doc.get("reply_to"),
            created_on=doc["created_on"],
        )


class MongoStreamDirectory(_MongoRepository, RecipientDirectoryInterface):
    """MongoDB implementation of RecipientDirectoryInterface.

    Reads ``{"stream_id": ..., "owner_address": ...}`` documents.
    """

    async def lookup_owner(self, stream_id: str) -> str | None:
        """Get the owner account of a stream."""
        doc = await self._client.streams.find_one({"stream_id": stream_id})
        if doc is None:
            logger.debug("stream_not_found", stream_id=stream_id)
            return None
        return doc.get("owner_address")
