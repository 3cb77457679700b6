"""Structured logging configuration.

stdout carries the MCP stdio transport, so every log line goes to stderr
(or a file) and never to stdout.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog

from .settings import settings

# File stream opened for settings.log_file; closed when logging is reconfigured
_log_file: Optional[TextIO] = None


def configure_logging(
    level: Optional[str] = None,
    output: Optional[TextIO] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Level name, defaults to settings.log_level.
        output: Output stream, defaults to settings.log_file or stderr.
        json_format: JSON lines instead of console rendering.
    """
    global _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None

    level_no = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO
    if output is None:
        if settings.log_file:
            _log_file = output = open(settings.log_file, "a")
        else:
            output = sys.stderr
    if json_format is None:
        json_format = settings.log_json

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level_no, force=True)
