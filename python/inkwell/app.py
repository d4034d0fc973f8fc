"""Application factory for the Inkwell content API.

The app serves the rich-text editor's two sanitizer call points (seeding
untrusted content, persisting edits) plus plain-text field hygiene.

Middleware ordering: middleware runs in reverse order of registration, so
``add_request_id_middleware`` must be called last. RequestIDMiddleware is
then outermost and every response, error envelopes included, carries
X-Request-ID.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from inkwell.api.routes import create_api_router
from inkwell.config import Settings, get_settings
from inkwell.logging import configure_logging, get_logger
from inkwell.middleware.request_id import RequestIDMiddleware
from inkwell.responses import EXCEPTION_HANDLERS

logger = get_logger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "content_api_started",
            env=settings.inkwell_env.value,
            max_html_bytes=settings.max_html_bytes,
            sanitize_max_length=settings.sanitize_max_length,
            skip_fields=len(settings.skip_field_list),
        )
        yield
        logger.info("content_api_stopped")

    return lifespan


def create_app() -> FastAPI:
    """Build the FastAPI app from the current settings.

    Logging is configured here rather than at import time so tests can set
    the environment first.
    """
    settings = get_settings()
    configure_logging(json_format=settings.log_json)

    app = FastAPI(
        title="Inkwell API",
        description="Rich-text content service: HTML sanitization for the editor",
        version="0.1.0",
        exception_handlers=EXCEPTION_HANDLERS,
        lifespan=_lifespan(settings),
    )
    app.include_router(create_api_router())
    return app


def add_request_id_middleware(app: FastAPI, log_requests: bool = True) -> None:
    """Install RequestIDMiddleware. Call after all other middleware."""
    app.add_middleware(RequestIDMiddleware, log_requests=log_requests)
