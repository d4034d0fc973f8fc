"""Pydantic schemas for request/response models.

All schemas are re-exported here for convenient imports.
"""

from inkwell.schemas.content import SanitizeHtmlRequest, SanitizeHtmlResponse

__all__ = [
    "SanitizeHtmlRequest",
    "SanitizeHtmlResponse",
]
