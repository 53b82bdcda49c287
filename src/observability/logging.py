"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


_LEVELS_BY_NAME: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(name: str) -> int:
    """Convert a configured level name to a logging level.

    Args:
        name: Level name such as ``info`` or ``WARN``.

    Returns:
        Logging level number, INFO for unknown names.
    """
    return _LEVELS_BY_NAME.get(name.strip().lower(), logging.INFO)


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for the pipeline and its CLI.

    Events carry an ISO timestamp, their level and any context bound with
    ``bind_request_context``. Logs go to stderr so stdout stays free for
    command output.

    Args:
        level: Logging level number or a name accepted by
            ``parse_log_level``.
        output: Output stream.
        json_format: Render JSON lines instead of the colored console format.
    """
    if isinstance(level, str):
        level = parse_log_level(level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def bind_request_context(request_id: str) -> None:
    """Bind request context to all subsequent log messages.

    Args:
        request_id: Unique identifier of the acquisition request.
    """
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    """Clear request context from log messages."""
    structlog.contextvars.unbind_contextvars("request_id")
