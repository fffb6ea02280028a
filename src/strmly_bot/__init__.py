"""strmly_bot - Live-chat donation bot for the strmly streaming platform.

This package provides tools for:
- Detecting chat messages addressed to the donation bot
- Extracting donation amount and message from free text with an LLM
- Validating the extracted intent against untrusted input
- Paying the stream owner on-chain, at most once per chat message

Example usage:
    from strmly_bot import (
        StrmlyBot,
        MongoChatStore,
        MongoStreamDirectory,
        OpenAIProvider,
        JsonRpcChainSubmitter,
    )

    async with StrmlyBot(
        chat_store_class=MongoChatStore,
        directory_class=MongoStreamDirectory,
        llm_class=OpenAIProvider,
        chain_class=JsonRpcChainSubmitter,
    ) as bot:
        session = bot.session("S1")
        await session.post("0xAAA...", "@ly bot donate 0.1 eth nice stream")
        await session.drain()
"""

__version__ = "0.1.0"

from strmly_bot.infra.chain.rpc_submitter import JsonRpcChainSubmitter
from strmly_bot.infra.llm.anthropic_provider import AnthropicProvider
from strmly_bot.infra.llm.openai_provider import OpenAIProvider
from strmly_bot.infra.mongo.repositories import MongoChatStore, MongoStreamDirectory
from strmly_bot.interfaces.chain import ChainSubmitterInterface
from strmly_bot.interfaces.chat_store import ChatStoreInterface
from strmly_bot.interfaces.directory import RecipientDirectoryInterface
from strmly_bot.interfaces.llm import TextGenerationInterface
from strmly_bot.interfaces.outcome import OutcomeSinkInterface
from strmly_bot.models.outcome import OutcomeKind, PipelineOutcome
from strmly_bot.orchestrator import StrmlyBot

__all__ = [  # noqa: RUF022
    # Orchestrator
    "StrmlyBot",
    "OutcomeKind",
    "PipelineOutcome",
    # Implementations
    "MongoChatStore",
    "MongoStreamDirectory",
    "OpenAIProvider",
    "AnthropicProvider",
    "JsonRpcChainSubmitter",
    # Interfaces
    "ChainSubmitterInterface",
    "ChatStoreInterface",
    "OutcomeSinkInterface",
    "RecipientDirectoryInterface",
    "TextGenerationInterface",
]
