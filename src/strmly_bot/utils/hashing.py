"""Hashing utilities for strmly_bot.

This module provides deterministic hash functions for deduplication keys.
"""

import hashlib

__all__ = [
    "generate_payout_key",
    "hash_text",
]


def hash_text(text: str) -> str:
    """Generate SHA256 hash of text.

    Args:
        text: Input text to hash

    Returns:
        Hexadecimal SHA256 hash string
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def generate_payout_key(stream_id: str, message_id: str) -> str:
    """Generate the deduplication key for a payout.

    The triggering chat message is the natural key: the same message
    delivered twice maps to the same key. The stream is included because
    message identifiers are only guaranteed unique within a stream.

    Args:
        stream_id: Stream the message was posted in
        message_id: Triggering chat message ID

    Returns:
        Hexadecimal SHA256 hash string
    """
    combined = f"payout|{stream_id}|{message_id}"
    return hash_text(combined)
