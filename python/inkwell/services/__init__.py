"""Content services.

Service-layer functions called by route handlers. The HTML sanitizer is the
library entry point for callers that do not go through the HTTP API.
"""

from inkwell.services.input_sanitize import (
    sanitize_object,
    sanitize_string,
    selective_sanitize_object,
)
from inkwell.services.sanitize_html import filter_attributes, filter_style, sanitize_html

__all__ = [
    "sanitize_html",
    "filter_style",
    "filter_attributes",
    "sanitize_string",
    "sanitize_object",
    "selective_sanitize_object",
]
