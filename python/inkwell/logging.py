"""Structured logging configuration using structlog.

Every entry carries the request context bound by the request-id middleware
(request_id, path, method) through ``structlog.contextvars``, so the
sanitizer's fallback warning and the access log can be correlated without
passing a logger around.

Content never reaches the logs. Rich-text bodies and field payloads are
untrusted and may be large; ``drop_content_fields`` removes them from any
event that names them, and callers log sizes instead.

Usage:
    from inkwell.logging import configure_logging, get_logger

    configure_logging(json_format=settings.log_json)
    logger = get_logger(__name__)
    logger.info("html_sanitized", input_bytes=120, output_bytes=96)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    merge_contextvars,
)

# Event keys that could carry request content
CONTENT_FIELDS = frozenset({"html", "payload", "body"})


def drop_content_fields(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Remove content-bearing keys from an event before it is rendered."""
    for key in CONTENT_FIELDS.intersection(event_dict):
        del event_dict[key]
    return event_dict


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        json_format: JSON lines if True, console-friendly output otherwise.
        level: Root log level.
    """
    shared_processors = [
        merge_contextvars,
        drop_content_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # RequestIDMiddleware writes the access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_request_context(**values: Any) -> None:
    """Attach values to every log entry emitted for the current request."""
    bind_contextvars(**values)


def clear_request_context() -> None:
    """Drop all request-scoped log context."""
    clear_contextvars()


def get_request_id() -> str | None:
    """Return the correlation ID of the current request, if any."""
    return get_contextvars().get("request_id")
