"""Stream directory interface for strmly_bot."""

from typing import ClassVar, Protocol, runtime_checkable

__all__ = [
    "RecipientDirectoryInterface",
]


@runtime_checkable
class RecipientDirectoryInterface(Protocol):
    """Contract for resolving the owning account of a live stream."""

    config_class: ClassVar[type | None] = None

    async def lookup_owner(self, stream_id: str) -> str | None:
        """Get the owner account of a stream.

        Args:
            stream_id: Stream (playback) identifier

        Returns:
            Owner account address, or None if the stream or owner is unknown
        """
        ...
