"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``) and initialises the schema.  On
shutdown it closes the connection cleanly.  Tests pass their own in-memory
connection to :func:`create_app` instead.

Handlers hold ``app.state.db_lock`` for every use of the connection (see
:mod:`cms.api.deps`).

Routers
-------
    /api/admin    — collection (content type) management
    /api/content  — entries of a collection, addressed by slug

Errors
------
Every error response has the shape ``{"error": {"message", "details"?}}``.
"""

from __future__ import annotations

import sqlite3
import threading
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cms.api.routers import admin as admin_router
from cms.api.routers import content as content_router
from cms.config import settings
from cms.db import get_connection, init_db
from cms.errors import CMSError
from cms.logging import configure_logging

logger = structlog.get_logger(__name__)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CMSError)
    async def cms_error_handler(request: Request, exc: CMSError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"] if part != "body"),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content={"error": {"message": "Invalid request", "details": details}},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", method=request.method, path=request.url.path)
        message = str(exc) if settings.debug else "Internal server error"
        return JSONResponse(status_code=500, content={"error": {"message": message}})


def create_app(conn: Optional[sqlite3.Connection] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        conn: Use this connection instead of opening ``settings.db_path``.
            The caller keeps ownership and closes it.
    """
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the DB on startup and close it on shutdown."""
        owned = conn is None
        db = get_connection() if owned else conn
        init_db(db)
        app.state.db = db
        try:
            yield
        finally:
            if owned:
                db.close()

    app = FastAPI(
        title="Headless CMS API",
        description=(
            "Define collections (content types) whose fields are stored as data, "
            "then create, filter, sort and page their entries over REST."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.db_lock = threading.Lock()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):  # type: ignore[no-untyped-def]
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )

    _install_error_handlers(app)

    app.include_router(admin_router.router, prefix="/api/admin", tags=["admin"])
    app.include_router(content_router.router, prefix="/api/content", tags=["content"])

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn cms.api.app:app --reload
app = create_app()
