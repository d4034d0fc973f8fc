"""Response envelopes and the exception handlers that produce them.

Success: ``{"data": ...}``
Error:   ``{"error": {"code": "E_...", "message": "...", "request_id": "..."}}``

Every rejected request is logged once, here, with the reason and whatever
size context the error carries. Messages returned to the client never
include request content or exception details.
"""

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.errors import ApiError, ApiErrorCode, error_code_for_status
from inkwell.logging import get_logger, get_request_id

logger = get_logger(__name__)


def success_response(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"data": data}


def error_response(
    code: ApiErrorCode, message: str, request_id: str | None = None
) -> dict[str, Any]:
    """Build the error envelope.

    The request_id defaults to the one bound for the current request, so
    clients can quote it when reporting a rejected edit.
    """
    if request_id is None:
        request_id = get_request_id()

    error = {"code": code.value, "message": message}
    if request_id:
        error["request_id"] = request_id
    return {"error": error}


def _error_json(code: ApiErrorCode, status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_response(code, message))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.info(
        "request_rejected",
        code=exc.code.value,
        status_code=exc.status_code,
        **exc.log_fields,
    )
    return _error_json(exc.code, exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema and JSON decoding failures are both invalid requests.

    Only the failing locations are logged; validation errors also carry the
    offending input, which stays out of the logs.
    """
    errors = exc.errors()
    malformed = any(err.get("type") == "json_invalid" for err in errors)
    logger.info(
        "request_rejected",
        code=ApiErrorCode.E_INVALID_REQUEST.value,
        status_code=400,
        reason="malformed_json" if malformed else "validation",
        locations=[".".join(str(part) for part in err.get("loc", ())) for err in errors],
    )
    message = "Malformed JSON body" if malformed else "Invalid request body"
    return _error_json(ApiErrorCode.E_INVALID_REQUEST, 400, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) as envelopes."""
    code = error_code_for_status(exc.status_code)
    message = str(exc.detail) if exc.detail else "An error occurred"
    return _error_json(code, exc.status_code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 E_INTERNAL; the traceback goes to the server log only."""
    logger.exception("unhandled_exception", error_type=type(exc).__name__)
    return _error_json(ApiErrorCode.E_INTERNAL, 500, "Internal server error")


EXCEPTION_HANDLERS = {
    ApiError: api_error_handler,
    RequestValidationError: validation_error_handler,
    StarletteHTTPException: http_exception_handler,
    Exception: unhandled_exception_handler,
}
