"""Structured logging for strmly_bot.

structlog is configured once per process: pretty console output while
developing, one JSON object per line in production. Every event carries
the service name, and events emitted while a chat message is processed
also carry its ``stream_id`` and ``message_id`` (see message_context).
"""

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog

__all__ = [
    "SERVICE_NAME",
    "configure_logging",
    "get_logger",
    "message_context",
]

SERVICE_NAME = "strmly-bot"

# Client libraries that log every HTTP request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "motor", "aiohttp", "openai", "anthropic")


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        json_output: Render JSON lines instead of colored console output
        add_timestamp: Add an ISO timestamp to every event
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if json_output:
        processors += [
            _add_service,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    numeric_level = _resolve_level(level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually as ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def message_context(stream_id: str, message_id: str) -> AbstractContextManager[Any]:
    """Bind a chat message's identity to every event logged inside the block.

    Context variables are task-local, so concurrent pipeline tasks do not
    see each other's bindings.

    Example:
        with message_context(message.stream_id, message.message_id):
            outcome = await pipeline.process(message)
    """
    return structlog.contextvars.bound_contextvars(stream_id=stream_id, message_id=message_id)


# Console defaults until the application configures logging itself
configure_logging()
