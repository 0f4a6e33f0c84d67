"""FastAPI application entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from greenhorn import __version__
from greenhorn.api.health import router as health_router
from greenhorn.api.pages import router as pages_router
from greenhorn.config import Settings
from greenhorn.exceptions import (
    ContentReadError,
    InternalServerError,
    PageNotFoundError,
    TemplateError,
)
from greenhorn.filesystem.toml_manager import load_site_config

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Sequence

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.INFO if debug else logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: load the site configuration once."""
    settings: Settings = app.state.settings
    _configure_logging(settings.debug)
    logger.info("Starting Greenhorn (debug=%s)", settings.debug)

    try:
        app.state.site_config = load_site_config(settings.config_file)
    except Exception as exc:
        logger.critical("Failed to load site configuration %s: %s", settings.config_file, exc)
        raise

    yield

    logger.info("Greenhorn stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Greenhorn",
        description="Markdown pages served from a TOML site configuration",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    # Mounted before the page routes so /static/... is not read as a list item
    static_dir = settings.static_dir
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    app.include_router(health_router)
    app.include_router(pages_router)

    @app.exception_handler(PageNotFoundError)
    async def page_not_found_handler(
        request: Request, exc: PageNotFoundError
    ) -> PlainTextResponse:
        logger.info("Page not found in %s %s: %s", request.method, request.url.path, exc.name)
        return PlainTextResponse("Page not found!", status_code=404)

    @app.exception_handler(ContentReadError)
    async def content_read_error_handler(
        request: Request, exc: ContentReadError
    ) -> PlainTextResponse:
        logger.error(
            "ContentReadError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return PlainTextResponse("Configuration error!", status_code=500)

    @app.exception_handler(TemplateError)
    async def template_error_handler(request: Request, exc: TemplateError) -> PlainTextResponse:
        logger.error(
            "TemplateError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return PlainTextResponse("Template error!", status_code=500)

    @app.exception_handler(InternalServerError)
    async def internal_server_error_handler(
        request: Request, exc: InternalServerError
    ) -> PlainTextResponse:
        logger.error(
            "InternalServerError in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return PlainTextResponse("Internal server error", status_code=500)

    return app


app = create_app()


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="greenhorn",
        description="Serve markdown pages described by a TOML site configuration.",
    )
    parser.add_argument("--host", help="Address to bind (default: from settings)")
    parser.add_argument("--port", "-p", type=int, help="Port to bind (default: from settings)")
    parser.add_argument(
        "--config-file", "-c", type=Path, help="Site configuration file (TOML)"
    )
    parser.add_argument("--static-dir", type=Path, help="Directory served under /static")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def cli_entry(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for running the server."""
    import uvicorn

    args = _parse_args(argv)
    overrides = {
        key: value
        for key, value in (
            ("host", args.host),
            ("port", args.port),
            ("config_file", args.config_file),
            ("static_dir", args.static_dir),
        )
        if value is not None
    }
    if args.debug:
        overrides["debug"] = True

    settings: Settings = app.state.settings
    settings = settings.model_copy(update=overrides)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
    )
