"""
Web server for MiniFlix.

Provides the FastAPI application: session-authenticated JSON API, the Range
aware video endpoint, and the static frontend.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from miniflix.auth.identity import SessionIdentityProvider
from miniflix.catalog.resolver import CatalogResolver
from miniflix.infra.db import create_schema, ensure_sqlite_directory, get_engine, get_sessionmaker
from miniflix.infra.exceptions import MiniFlixError, NotFound, StorageUnavailable
from miniflix.infra.logging import get_logger
from miniflix.infra.settings import Settings, settings
from miniflix.web.api import auth, catalog, progress, stream
from miniflix.web.middleware import RequestContextMiddleware

logger = get_logger(__name__)

# Error codes for routing-level failures raised by Starlette itself
HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "not_authenticated",
    404: "not_found",
    405: "method_not_allowed",
}


async def _miniflix_error_handler(request: Request, exc: MiniFlixError) -> JSONResponse:
    if isinstance(exc, StorageUnavailable):
        logger.error("storage_unavailable", error=str(exc))
    elif exc.status_code >= 500:
        logger.error("request_failed", error=str(exc))
    else:
        logger.info("request_rejected", status=exc.status_code, error=exc.error_code)
    return JSONResponse({"error": exc.error_code}, status_code=exc.status_code)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    logger.info("request_rejected", status=exc.status_code, error=code)
    return JSONResponse({"error": code}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_rejected", status=400, error="bad_request", detail=str(exc.errors()))
    return JSONResponse({"error": "bad_request"}, status_code=400)


def create_app(cfg: Settings | None = None) -> FastAPI:
    """
    Build the application for ``cfg`` (the global settings by default).

    Creates the SQLite data directory, the video directory and the database
    tables if they do not exist yet.
    """
    cfg = cfg or settings

    ensure_sqlite_directory(cfg.database_url)
    Path(cfg.video_dir).mkdir(parents=True, exist_ok=True)

    engine = get_engine(cfg=cfg)
    create_schema(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("server_started", video_dir=str(cfg.video_dir))
        yield
        engine.dispose()

    app = FastAPI(title="MiniFlix", lifespan=lifespan)
    app.state.settings = cfg
    app.state.engine = engine
    app.state.session_factory = get_sessionmaker(engine)
    app.state.catalog = CatalogResolver(cfg.video_dir, cfg.catalog_file)
    app.state.identity_provider = SessionIdentityProvider()

    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.session_secret,
        max_age=cfg.session_max_age,
        same_site="lax",
        https_only=cfg.session_https_only,
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(MiniFlixError, _miniflix_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(progress.router)
    app.include_router(stream.router)

    static_dir = Path(cfg.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")
    thumbnail_dir = Path(cfg.thumbnail_dir)
    if thumbnail_dir.is_dir():
        app.mount("/thumbnails", StaticFiles(directory=thumbnail_dir), name="thumbnails")

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        """Serve the single-page frontend entry point."""
        index_html = static_dir / "index.html"
        if not index_html.is_file():
            raise NotFound("index.html not found")
        return FileResponse(index_html, media_type="text/html")

    return app


def run_server(cfg: Settings | None = None, host: str | None = None, port: int | None = None) -> None:
    """Run the application under uvicorn until interrupted."""
    cfg = cfg or settings
    app = create_app(cfg)
    uvicorn.run(
        app,
        host=host or cfg.host,
        port=port or cfg.port,
        log_level=cfg.log_level.lower(),
    )
