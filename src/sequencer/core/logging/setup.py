from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

import orjson
import structlog

from sequencer.core.config.settings import settings


def _json_serializer(obj: Any, default: Any) -> str:
    """
    JSON serializer for structured logs, backed by orjson.
    """
    return orjson.dumps(obj, default=default).decode("utf-8")


def configure_logging(
    *,
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    cache: bool = True,
) -> None:
    """
    Configure structured logging for the host process.

    The library never calls this itself; applications call it once at startup.
    `level` defaults to settings.log_level, `stream` to stdout.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    out = stream if stream is not None else sys.stdout

    processors: list[Any] = [
        # Merge context variables bound via bind_context()
        structlog.contextvars.merge_contextvars,

        # Standard metadata
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),

        # Exception handling
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.dict_tracebacks,

        # Final JSON output
        structlog.processors.JSONRenderer(serializer=_json_serializer),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=cache,
    )

    # Ensure stdlib logging flows through the same output
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[logging.StreamHandler(out)],
    )


def bind_context(**values: Any) -> None:
    """
    Bind contextual information to all future log entries.

    Example:
        bind_context(job="nightly-import")
    """
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
