"""MongoDB infrastructure for strmly_bot."""

from strmly_bot.infra.mongo.client import MongoClient
from strmly_bot.infra.mongo.repositories import MongoChatStore, MongoStreamDirectory

__all__ = ["MongoChatStore", "MongoClient", "MongoStreamDirectory"]
