"""Rich-text content schemas."""

from pydantic import BaseModel, Field


class SanitizeHtmlRequest(BaseModel):
    """Request schema for POST /content/sanitize.

    The editor sends this both when seeding content from an untrusted source
    and before persisting edited content. Size limits are enforced in the
    route against MAX_HTML_BYTES, since they are measured in UTF-8 bytes.
    """

    html: str = Field(description="Untrusted HTML fragment from the rich-text editor.")


class SanitizeHtmlResponse(BaseModel):
    """Response schema for POST /content/sanitize."""

    html: str
