"""Content routes.

Routes are transport-only:
- Enforce size limits
- Call exactly one service function
- Record sizes for the access log and return success(...)
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request

from inkwell.config import Settings, get_settings
from inkwell.errors import PayloadTooLargeError
from inkwell.middleware.request_id import annotate_access_log
from inkwell.responses import success_response
from inkwell.schemas.content import SanitizeHtmlRequest, SanitizeHtmlResponse
from inkwell.services import input_sanitize
from inkwell.services.sanitize_html import sanitize_html

router = APIRouter()


@router.post("/content/sanitize")
def sanitize_content(
    request: Request,
    body: SanitizeHtmlRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Sanitize rich-text HTML for display or persistence.

    Returns:
        - html: the sanitized fragment

    Raises:
        PayloadTooLargeError: If html exceeds MAX_HTML_BYTES (UTF-8 bytes).
    """
    size = len(body.html.encode("utf-8"))
    annotate_access_log(request, html_bytes_in=size)
    if size > settings.max_html_bytes:
        raise PayloadTooLargeError("html", size, settings.max_html_bytes)

    result = SanitizeHtmlResponse(html=sanitize_html(body.html))
    annotate_access_log(request, html_bytes_out=len(result.html.encode("utf-8")))
    return success_response(result.model_dump(mode="json"))


@router.post("/content/fields")
def sanitize_fields(
    request: Request,
    payload: Annotated[dict[str, Any], Body()],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Sanitize the plain-text fields of a JSON object.

    Every string value is stripped of dangerous patterns and HTML-escaped,
    except values under credential-like keys, which are returned unchanged.
    """
    skip_fields = settings.skip_field_list
    annotate_access_log(
        request,
        field_count=len(payload),
        skipped_fields=sum(input_sanitize.should_skip_field(k, skip_fields) for k in payload),
    )
    sanitized = input_sanitize.selective_sanitize_object(
        payload,
        skip_fields=skip_fields,
        max_length=settings.sanitize_max_length,
    )
    return success_response(sanitized)
