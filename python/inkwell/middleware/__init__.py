"""Middleware modules for the Inkwell API."""

from inkwell.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    annotate_access_log,
)

__all__ = ["RequestIDMiddleware", "REQUEST_ID_HEADER", "annotate_access_log"]
