"""HTTP surface for strmly_bot.

Exposes the donation extraction step to the web client with the JSON
contract it already speaks:

    POST /api/partitionChatBotDonation
    {"chatMessage": "..."}
    -> {"status": "success", "result": {"amount": 0.1, "message": "..."}}
    -> {"status": "failed", "message": "..."}

Failures are reported in the body with HTTP 200.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from strmly_bot.config import StrmlyConfig
from strmly_bot.logging import get_logger
from strmly_bot.models.wire import ExtractionRequest, ExtractionResponse

__all__ = [
    "EXTRACTION_PATH",
    "build_app",
    "create_app",
]

logger = get_logger(__name__)

EXTRACTION_PATH = "/api/partitionChatBotDonation"

ExtractFn = Callable[[str], Awaitable[ExtractionResponse]]


def _add_routes(app: FastAPI, get_extract: Callable[[Request], ExtractFn]) -> None:
    @app.post(EXTRACTION_PATH, response_model=ExtractionResponse, response_model_exclude_none=True)
    async def partition_chat_bot_donation(
        body: ExtractionRequest,
        request: Request,
    ) -> ExtractionResponse:
        response = await get_extract(request)(body.chat_message)
        logger.info("extraction_request_handled", status=response.status)
        return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}


def create_app(extract: ExtractFn, allow_origins: list[str] | None = None) -> FastAPI:
    """Create the app around an extraction function.

    Args:
        extract: Coroutine function mapping chat text to a response
        allow_origins: CORS origins (default: all)
    """
    app = FastAPI(title="strmly-bot")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _add_routes(app, lambda _request: extract)
    return app


def build_app(config: StrmlyConfig | None = None) -> FastAPI:
    """Create the app backed by a StrmlyBot built from settings."""
    from strmly_bot.infra.chain.rpc_submitter import JsonRpcChainSubmitter
    from strmly_bot.infra.llm import provider_class
    from strmly_bot.infra.mongo.repositories import MongoChatStore, MongoStreamDirectory
    from strmly_bot.orchestrator import StrmlyBot

    config = config or StrmlyConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with StrmlyBot(
            chat_store_class=MongoChatStore,
            directory_class=MongoStreamDirectory,
            llm_class=provider_class(config.llm.provider),
            chain_class=JsonRpcChainSubmitter,
            config=config,
        ) as bot:
            app.state.bot = bot
            yield

    app = FastAPI(title="strmly-bot", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _add_routes(app, lambda request: request.app.state.bot.extract_donation)
    return app
