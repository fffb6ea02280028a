#!/usr/bin/env python
"""Run the donation extraction HTTP endpoint.

Usage:
    python scripts/serve.py [--host 0.0.0.0] [--port 8000]

Configuration is read from .env (STRMLY_* variables); STRMLY_LOG_LEVEL and
STRMLY_LOG_JSON control log output.
"""

import argparse

import uvicorn

from strmly_bot.api.app import build_app
from strmly_bot.config import StrmlyConfig
from strmly_bot.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="strmly-bot extraction endpoint")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    config = StrmlyConfig()
    configure_logging(level=config.log_level, json_output=config.log_json)
    uvicorn.run(build_app(config), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
