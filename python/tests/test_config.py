"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from inkwell.config import (
    Environment,
    Settings,
    clear_settings_cache,
    get_settings,
)
from inkwell.services.input_sanitize import SKIP_SANITIZE_FIELDS


def _make_settings(**overrides) -> Settings:
    """Build a Settings instance with test defaults + overrides."""
    defaults = {"INKWELL_ENV": "test"}
    defaults.update(overrides)
    return Settings(**defaults)


class TestDefaults:
    def test_defaults(self):
        s = _make_settings()
        assert s.inkwell_env == Environment.TEST
        assert s.max_html_bytes == 1024 * 1024
        assert s.sanitize_max_length is None
        assert s.sanitize_skip_fields is None

    def test_skip_field_list_defaults_to_credentials(self):
        assert _make_settings().skip_field_list == list(SKIP_SANITIZE_FIELDS)


class TestOverrides:
    def test_skip_field_list_appends_configured_fields(self):
        s = _make_settings(SANITIZE_SKIP_FIELDS=" bio, ,notes ")
        assert s.skip_field_list == [*SKIP_SANITIZE_FIELDS, "bio", "notes"]

    def test_limits_overridden(self):
        s = _make_settings(MAX_HTML_BYTES=2048, SANITIZE_MAX_LENGTH=500)
        assert s.max_html_bytes == 2048
        assert s.sanitize_max_length == 500

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("INKWELL_ENV", "staging")
        monkeypatch.setenv("MAX_HTML_BYTES", "4096")
        clear_settings_cache()

        s = get_settings()

        assert s.inkwell_env == Environment.STAGING
        assert s.max_html_bytes == 4096

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestValidation:
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_html_limit_rejected(self, value):
        with pytest.raises(ValidationError, match="MAX_HTML_BYTES"):
            _make_settings(MAX_HTML_BYTES=value)

    def test_non_positive_max_length_rejected(self):
        with pytest.raises(ValidationError, match="SANITIZE_MAX_LENGTH"):
            _make_settings(SANITIZE_MAX_LENGTH=0)

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            _make_settings(INKWELL_ENV="qa")
