"""Sanitization of plain-text request fields.

Rich-text bodies go through sanitize_html. Everything else a client sends as
a string (titles, names, search terms, query parameters) is treated as plain
text: dangerous patterns are stripped and HTML-significant characters are
escaped, so the value is inert wherever it is later rendered.

Credential-like fields (passwords, tokens, keys, signatures) are never
rewritten; see SKIP_SANITIZE_FIELDS.
"""

import re
from collections.abc import Iterable
from typing import Any

# Characters escaped in plain-text values
HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}

DANGEROUS_CHARS_RE = re.compile(r"[&<>\"'`=/]")

SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
INLINE_HANDLER_RE = re.compile(r"\s*on\w+\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE)
JAVASCRIPT_URI_RE = re.compile(r"javascript\s*:", re.IGNORECASE)
DATA_HTML_URI_RE = re.compile(r"data\s*:\s*text/html", re.IGNORECASE)
VBSCRIPT_URI_RE = re.compile(r"vbscript\s*:", re.IGNORECASE)

# Fields whose values must reach the handler byte-for-byte
SKIP_SANITIZE_FIELDS = (
    "password",
    "passwordHash",
    "password_hash",
    "token",
    "accessToken",
    "refreshToken",
    "access_token",
    "refresh_token",
    "authorization",
    "apiKey",
    "api_key",
    "secret",
    "signature",
)


def escape_html(value: str) -> str:
    """Escape HTML-significant characters."""
    return DANGEROUS_CHARS_RE.sub(lambda m: HTML_ENTITIES[m.group(0)], value)


def strip_dangerous_patterns(value: str) -> str:
    """Remove script blocks, quoted inline handlers and script-capable URI schemes."""
    value = SCRIPT_BLOCK_RE.sub("", value)
    value = INLINE_HANDLER_RE.sub("", value)
    value = JAVASCRIPT_URI_RE.sub("", value)
    value = DATA_HTML_URI_RE.sub("", value)
    return VBSCRIPT_URI_RE.sub("", value)


def sanitize_string(
    value: str,
    *,
    escape: bool = True,
    strip_dangerous: bool = True,
    trim: bool = True,
    max_length: int | None = None,
) -> str:
    """Sanitize a single plain-text value.

    Steps run in order: trim, strip dangerous patterns, escape, truncate.
    Truncation happens after escaping, so max_length bounds the stored size.

    Args:
        value: The raw string.
        escape: Escape HTML-significant characters.
        strip_dangerous: Remove script blocks, inline handlers and unsafe schemes.
        trim: Strip surrounding whitespace.
        max_length: Truncate the result to this many characters.

    Returns:
        The sanitized string.
    """
    result = value

    if trim:
        result = result.strip()

    if strip_dangerous:
        result = strip_dangerous_patterns(result)

    if escape:
        result = escape_html(result)

    if max_length and len(result) > max_length:
        result = result[:max_length]

    return result


def should_skip_field(field_name: str, skip_fields: Iterable[str] = SKIP_SANITIZE_FIELDS) -> bool:
    """Check whether a field name contains any skip field (case-insensitive)."""
    lower_field = field_name.lower()
    return any(skip.lower() in lower_field for skip in skip_fields)


def sanitize_object(obj: Any, max_length: int | None = None, _seen: dict[int, Any] | None = None) -> Any:
    """Deep-sanitize every string in a JSON-like structure.

    Keys are stripped of dangerous patterns but neither escaped nor trimmed.
    Non-string scalars pass through. Each container is sanitized once per
    call; a container that appears again (shared or cyclic) resolves to the
    same sanitized copy.
    """
    if _seen is None:
        _seen = {}

    if isinstance(obj, str):
        return sanitize_string(obj, max_length=max_length)

    if not isinstance(obj, (dict, list, tuple)):
        return obj

    if id(obj) in _seen:
        return _seen[id(obj)]

    if isinstance(obj, (list, tuple)):
        items: list[Any] = []
        _seen[id(obj)] = items
        items.extend(sanitize_object(item, max_length, _seen) for item in obj)
        return items

    sanitized: dict[Any, Any] = {}
    _seen[id(obj)] = sanitized
    for key, value in obj.items():
        if isinstance(key, str):
            key = sanitize_string(key, escape=False, trim=False)
        sanitized[key] = sanitize_object(value, max_length, _seen)
    return sanitized


def selective_sanitize_object(
    obj: Any,
    skip_fields: Iterable[str] = SKIP_SANITIZE_FIELDS,
    max_length: int | None = None,
    _seen: dict[int, Any] | None = None,
) -> Any:
    """Deep-sanitize a request body, leaving credential-like fields untouched.

    Keys are kept verbatim. A value whose key matches a skip field is returned
    unchanged, including nested structures below it. Shared and cyclic
    containers resolve to their sanitized copy, as in sanitize_object.
    """
    skip_fields = tuple(skip_fields)
    if _seen is None:
        _seen = {}

    if isinstance(obj, str):
        return sanitize_string(obj, max_length=max_length)

    if not isinstance(obj, (dict, list, tuple)):
        return obj

    if id(obj) in _seen:
        return _seen[id(obj)]

    if isinstance(obj, (list, tuple)):
        items: list[Any] = []
        _seen[id(obj)] = items
        items.extend(
            selective_sanitize_object(item, skip_fields, max_length, _seen) for item in obj
        )
        return items

    sanitized: dict[Any, Any] = {}
    _seen[id(obj)] = sanitized
    for key, value in obj.items():
        if isinstance(key, str) and should_skip_field(key, skip_fields):
            sanitized[key] = value
        else:
            sanitized[key] = selective_sanitize_object(value, skip_fields, max_length, _seen)
    return sanitized
