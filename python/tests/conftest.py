"""Pytest configuration and fixtures for Inkwell tests.

Test isolation strategy:
- Settings are read from the environment and cached; every test starts with a
  cleared cache and INKWELL_ENV=test
- API tests build the app through create_app() and talk to it via TestClient
"""

import sys
from collections.abc import Generator
from pathlib import Path

# Add repo root to sys.path for importing top-level packages (e.g., apps)
_repo_root = Path(__file__).parent.parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import pytest
from fastapi.testclient import TestClient

from inkwell.app import add_request_id_middleware, create_app
from inkwell.config import clear_settings_cache


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test against fresh test-environment settings."""
    monkeypatch.setenv("INKWELL_ENV", "test")
    monkeypatch.setenv("LOG_JSON", "false")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI test client with the full middleware stack."""
    app = create_app()
    add_request_id_middleware(app, log_requests=False)
    with TestClient(app) as client:
        yield client
