"""X-Request-ID correlation and the per-request access log.

The editor sends an X-Request-ID with each save so a rejected or rewritten
draft can be traced through the logs. A valid incoming ID is reused (UUIDs
lowercased); anything else is replaced with a fresh UUID4. The ID is echoed
on every response, error envelopes included.

Routes add their own fields to the access entry with ``annotate_access_log``
(for example how many bytes went into and came out of the sanitizer), so one
``request_completed`` line describes what happened to the content.
"""

import re
import time
import uuid
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from inkwell.logging import bind_request_context, clear_request_context, get_logger

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

TOKEN_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)

logger = get_logger(__name__)


def is_valid_request_id(value: str) -> bool:
    """A UUID or a short token of letters, digits, dots, dashes, underscores."""
    if len(value.encode("utf-8")) > MAX_REQUEST_ID_LENGTH:
        return False
    return bool(UUID_RE.match(value) or TOKEN_REQUEST_ID_RE.match(value))


def normalize_request_id(value: str) -> str:
    return value.lower() if UUID_RE.match(value) else value


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a valid client ID, otherwise mint a UUID4."""
    if incoming and is_valid_request_id(incoming):
        return normalize_request_id(incoming)
    return str(uuid.uuid4())


def annotate_access_log(request: Request, **fields: Any) -> None:
    """Add fields to this request's ``request_completed`` entry.

    Stored on request.state, which the middleware and the route share through
    the ASGI scope.
    """
    existing = getattr(request.state, "access_log_fields", None)
    if existing is None:
        existing = {}
        request.state.access_log_fields = existing
    existing.update(fields)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind the request ID for logging, echo it, and write the access log."""

    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.monotonic()
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        bind_request_context(request_id=request_id, path=request.url.path, method=request.method)

        try:
            response = await call_next(request)
        except Exception:
            # unhandled_exception_handler renders the 500 outside this middleware
            logger.exception("request_failed")
            clear_request_context()
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        if self.log_requests:
            fields = getattr(request.state, "access_log_fields", None) or {}
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
                **fields,
            )
        clear_request_context()
        return response
