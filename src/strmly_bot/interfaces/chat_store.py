"""Chat storage interface for strmly_bot.

This module defines the Protocol for the persisted chat-message log
and its live change feed.
"""

from collections.abc import AsyncIterator
from typing import ClassVar, Protocol, runtime_checkable

from strmly_bot.models.chat import ChatEvent, ChatMessageDTO

__all__ = [
    "ChatStoreInterface",
]


@runtime_checkable
class ChatStoreInterface(Protocol):
    """Contract for the append-only chat log of live streams.

    Messages are immutable once appended. Deletions happen outside
    this package and only show up as feed events.
    """

    config_class: ClassVar[type | None] = None

    async def append(self, message: ChatMessageDTO) -> str:
        """Persist a chat message.

        Args:
            message: Message to persist

        Returns:
            Message ID
        """
        ...

    def subscribe(self, stream_id: str) -> AsyncIterator[ChatEvent]:
        """Open the ordered live feed of insert/delete events for a stream.

        Args:
            stream_id: Stream to follow

        Returns:
            Async iterator of ChatEvent, in arrival order
        """
        ...

    async def query(self, stream_id: str, limit: int = 50) -> list[ChatMessageDTO]:
        """Get the most recent messages of a stream.

        Args:
            stream_id: Stream to query
            limit: Maximum number of messages

        Returns:
            Messages ordered oldest first
        """
        ...

    async def get_message(self, message_id: str) -> ChatMessageDTO | None:
        """Get a message by ID.

        Args:
            message_id: Message ID to retrieve

        Returns:
            ChatMessageDTO if found, None otherwise
        """
        ...
