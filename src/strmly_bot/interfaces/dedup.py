"""Deduplication store interface for strmly_bot."""

from typing import Protocol, runtime_checkable

__all__ = [
    "DedupStoreInterface",
]


@runtime_checkable
class DedupStoreInterface(Protocol):
    """Contract for an at-most-once claim registry."""

    async def claim(self, key: str) -> bool:
        """Atomically claim a key.

        Args:
            key: Deduplication key

        Returns:
            True for the first claim of key, False for every later one
        """
        ...
