"""MongoDB connection for strmly_bot.

One Motor client serves both the chat log (``chat_messages``) and the
stream directory (``streams``). The live chat feed is built on change
streams, which MongoDB only offers on replica sets and sharded clusters.
"""

from typing import TYPE_CHECKING, Any

from strmly_bot.config import MongoSettings
from strmly_bot.logging import get_logger
from strmly_bot.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

__all__ = [
    "MongoClient",
]

logger = get_logger(__name__)

get_async_motor = lazy_import("motor.motor_asyncio", "AsyncIOMotorClient", package="motor")


class MongoClient:
    """Motor client holding the chat and stream collections.

    Example:
        client = MongoClient(settings)
        await client.connect()
        owner = await client.streams.find_one({"stream_id": "S1"})
        await client.disconnect()
    """

    def __init__(self, settings: MongoSettings) -> None:
        self._settings = settings
        self._client = None
        self._db = None
        self._change_streams: bool | None = None

    async def connect(self) -> None:
        """Connect and ping; fails fast when no server is reachable."""
        if self._client is not None:
            return
        AsyncIOMotorClient = get_async_motor()  # noqa: N806

        self._client = AsyncIOMotorClient(
            self._settings.uri.get_secret_value(),
            serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
        )
        self._db = self._client[self._settings.database]
        await self._client.admin.command("ping")
        logger.info("connected_to_mongodb", database=self._settings.database)

    async def disconnect(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        self._change_streams = None
        logger.info("disconnected_from_mongodb")

    @property
    def db(self) -> "AsyncIOMotorDatabase[dict[str, Any]]":
        if self._db is None:
            raise RuntimeError("MongoClient not connected. Call connect() first.")
        return self._db

    @property
    def chat_messages(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        """Chat log; ``_id`` is the chat message ID."""
        return self.db[f"{self._settings.collection_prefix}chat_messages"]

    @property
    def streams(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        """Stream directory: ``{stream_id, owner_address}``."""
        return self.db[f"{self._settings.collection_prefix}streams"]

    async def supports_change_streams(self) -> bool:
        """Check whether the server can serve change streams.

        A standalone mongod answers ``hello`` without ``setName``; mongos
        reports ``msg: "isdbgrid"``.
        """
        if self._change_streams is None:
            hello = await self.db.command("hello")
            self._change_streams = "setName" in hello or hello.get("msg") == "isdbgrid"
            if not self._change_streams:
                logger.warning(
                    "mongodb_change_streams_unavailable",
                    hint="run MongoDB as a replica set to receive the live chat feed",
                )
        return self._change_streams

    async def create_indexes(self) -> None:
        # History reads: newest messages of one stream
        await self.chat_messages.create_index([("stream_id", 1), ("created_on", -1)])
        await self.streams.create_index("stream_id", unique=True)
        logger.info("created_mongodb_indexes")
