"""API error definitions.

The sanitizer never raises. Errors here describe why the HTTP surface
refused a request before any content reached it.
"""

from enum import Enum
from typing import Any


class ApiErrorCode(str, Enum):
    """Error codes returned in the ``error.code`` field of an envelope."""

    E_INVALID_REQUEST = "E_INVALID_REQUEST"  # 400
    E_NOT_FOUND = "E_NOT_FOUND"  # 404, unknown routes only
    E_PAYLOAD_TOO_LARGE = "E_PAYLOAD_TOO_LARGE"  # 413
    E_INTERNAL = "E_INTERNAL"  # 500


ERROR_CODE_TO_STATUS: dict[ApiErrorCode, int] = {
    ApiErrorCode.E_INVALID_REQUEST: 400,
    ApiErrorCode.E_NOT_FOUND: 404,
    ApiErrorCode.E_PAYLOAD_TOO_LARGE: 413,
    ApiErrorCode.E_INTERNAL: 500,
}

# Framework-raised statuses (routing, method mismatch) mapped onto our codes
STATUS_TO_ERROR_CODE: dict[int, ApiErrorCode] = {
    400: ApiErrorCode.E_INVALID_REQUEST,
    404: ApiErrorCode.E_NOT_FOUND,
    405: ApiErrorCode.E_INVALID_REQUEST,
    413: ApiErrorCode.E_PAYLOAD_TOO_LARGE,
    422: ApiErrorCode.E_INVALID_REQUEST,
}


def error_code_for_status(status_code: int) -> ApiErrorCode:
    """Pick the envelope code for a status the framework produced."""
    return STATUS_TO_ERROR_CODE.get(status_code, ApiErrorCode.E_INTERNAL)


class ApiError(Exception):
    """An error rendered as an ``{"error": ...}`` envelope.

    ``log_fields`` are attached to the server-side log entry only. They must
    describe the request (sizes, limits), never echo its content.
    """

    def __init__(self, code: ApiErrorCode, message: str, **log_fields: Any):
        self.code = code
        self.message = message
        self.status_code = ERROR_CODE_TO_STATUS.get(code, 500)
        self.log_fields = log_fields
        super().__init__(message)


class PayloadTooLargeError(ApiError):
    """Content larger than the configured byte limit."""

    def __init__(self, field: str, size_bytes: int, limit_bytes: int):
        super().__init__(
            ApiErrorCode.E_PAYLOAD_TOO_LARGE,
            f"{field} exceeds the {limit_bytes} byte limit",
            field=field,
            size_bytes=size_bytes,
            limit_bytes=limit_bytes,
        )
        self.field = field
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
