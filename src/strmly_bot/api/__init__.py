"""HTTP API for strmly_bot."""

from strmly_bot.api.app import EXTRACTION_PATH, build_app, create_app

__all__ = ["EXTRACTION_PATH", "build_app", "create_app"]
