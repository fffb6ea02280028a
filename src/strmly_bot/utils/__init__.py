"""Utility functions for strmly_bot.

This module contains internal utility functions.
"""

from strmly_bot.utils.hashing import generate_payout_key, hash_text

__all__ = [
    "generate_payout_key",
    "hash_text",
]
