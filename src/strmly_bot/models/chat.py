"""Chat models for strmly_bot.

These models represent live-stream chat lines and the events of the
chat change feed.
"""

import re
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

__all__ = [
    "ChatEvent",
    "ChatEventType",
    "ChatMessageDTO",
    "is_account_address",
]

# 0x followed by exactly 40 hex characters
_ACCOUNT_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_account_address(value: str) -> bool:
    """Check whether value is a well-formed chain account identifier."""
    return bool(_ACCOUNT_PATTERN.match(value))


class ChatMessageDTO(BaseModel, frozen=True):
    """One posted chat line in a live stream.

    Messages are immutable once persisted. The reply-to reference must point
    at a message of the same stream; that check needs the chat store and is
    done when posting (see ChatSession.post).

    Attributes:
        message_id: Message identifier assigned at creation
        stream_id: Live stream (playback) identifier
        sender_address: Chain account of the sender
        body: Message text
        reply_to: Optional identifier of another message in the same stream
        created_on: Creation timestamp in epoch seconds
    """

    message_id: str = Field(min_length=1)
    stream_id: str = Field(min_length=1)
    sender_address: str = Field(description="0x-prefixed account address")
    body: str
    reply_to: str | None = None
    created_on: int = Field(description="Epoch seconds")

    @field_validator("body")
    @classmethod
    def _body_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message body must not be empty")
        return value

    @field_validator("sender_address")
    @classmethod
    def _sender_is_account(cls, value: str) -> str:
        if not is_account_address(value):
            raise ValueError(f"malformed sender address: {value!r}")
        return value

    @model_validator(mode="after")
    def _not_self_reply(self) -> "ChatMessageDTO":
        if self.reply_to is not None and self.reply_to == self.message_id:
            raise ValueError("message cannot reply to itself")
        return self


class ChatEventType(StrEnum):
    """Kinds of events delivered by the chat change feed."""

    INSERT = "insert"
    DELETE = "delete"


class ChatEvent(BaseModel, frozen=True):
    """A change-feed event for one stream.

    Insert events carry the full message; delete events only the id.
    """

    event_type: ChatEventType
    stream_id: str
    message_id: str
    message: ChatMessageDTO | None = None

    @model_validator(mode="after")
    def _insert_has_message(self) -> "ChatEvent":
        if self.event_type == ChatEventType.INSERT and self.message is None:
            raise ValueError("insert events must carry the message")
        return self
