"""Interface contracts for strmly_bot.

This module exports all Protocol-based interfaces for dependency injection.
"""

from strmly_bot.interfaces.chain import ChainSubmitterInterface
from strmly_bot.interfaces.chat_store import ChatStoreInterface
from strmly_bot.interfaces.dedup import DedupStoreInterface
from strmly_bot.interfaces.directory import RecipientDirectoryInterface
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.interfaces.outcome import OutcomeSinkInterface

__all__ = [
    "ChainSubmitterInterface",
    "ChatStoreInterface",
    "DedupStoreInterface",
    "OutcomeSinkInterface",
    "RecipientDirectoryInterface",
    "TextGenerationInterface",
]
