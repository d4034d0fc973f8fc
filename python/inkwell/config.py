"""Application settings loaded from environment variables.

Environment Configuration:
    INKWELL_ENV: Deployment environment (local | test | staging | prod)
    LOG_JSON: Emit JSON logs (default true); console output otherwise

Content Limits:
    MAX_HTML_BYTES: Largest rich-text body accepted by /content/sanitize (UTF-8 bytes)
    SANITIZE_MAX_LENGTH: Optional truncation length for sanitized plain-text fields
    SANITIZE_SKIP_FIELDS: Comma-separated extra field names exempt from
        plain-text sanitization (added to the built-in credential fields)

Note: the HTML sanitizer has no settings. Its allowlists are fixed; these
options only shape the HTTP surface around it.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from inkwell.services.input_sanitize import SKIP_SANITIZE_FIELDS


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - MAX_HTML_BYTES must be positive
    - SANITIZE_MAX_LENGTH, when set, must be positive
    """

    inkwell_env: Environment = Field(default=Environment.LOCAL, alias="INKWELL_ENV")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    max_html_bytes: int = Field(default=1024 * 1024, alias="MAX_HTML_BYTES")  # 1 MiB
    sanitize_max_length: int | None = Field(default=None, alias="SANITIZE_MAX_LENGTH")
    sanitize_skip_fields: str | None = Field(default=None, alias="SANITIZE_SKIP_FIELDS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject limits that would disable or invert a bound."""
        if self.max_html_bytes <= 0:
            raise ValueError("MAX_HTML_BYTES must be a positive integer")

        if self.sanitize_max_length is not None and self.sanitize_max_length <= 0:
            raise ValueError("SANITIZE_MAX_LENGTH must be a positive integer when set")

        return self

    @property
    def skip_field_list(self) -> list[str]:
        """Built-in credential fields plus any configured extras."""
        extra = []
        if self.sanitize_skip_fields:
            extra = [f.strip() for f in self.sanitize_skip_fields.split(",") if f.strip()]
        return [*SKIP_SANITIZE_FIELDS, *extra]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
