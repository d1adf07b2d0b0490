"""
NoteShelf Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn app.main:app) and by the test suite.

Application Architecture:
    Middleware:   RequestID → NoteAccessLog → GZip → CORS
    Routes:       GET/POST /api/notes, GET /api/notes/{id}, GET /api/healthchecker
    Error map:    DuplicateTitle→409 │ NotFound→404 │ Storage→500 │ validation→422

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (fail fast)
    3. Build the Database handle and ping it (fail fast)
    Shutdown:
    1. Dispose the connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import Database
from app.exceptions import DuplicateTitleError, NotFoundError, StorageError
from app.middleware.logging import NoteAccessLogMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    at settings.log_level.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the Database handle for the lifetime of the process.

    A handle injected through create_app(database=...) is used as-is and
    left for its owner to dispose. Otherwise one is built from settings;
    a bad configuration or an unreachable database stops startup.
    """
    setup_logging()
    logger.info("NoteShelf Backend %s starting up...", __version__)

    owned: Optional[Database] = None
    if getattr(app.state, "database", None) is None:
        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))
            raise

        owned = Database.from_settings(settings)
        try:
            await owned.ping()
        except Exception as e:
            logger.error("Failed to connect to the database: %s", str(e))
            await owned.dispose()
            raise
        logger.info("Connected to the database successfully")
        app.state.database = owned

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("NoteShelf Backend shutting down...")
    if owned is not None:
        await owned.dispose()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map domain exceptions to JSON envelopes.

        DuplicateTitleError     → 409 {"status": "fail"}
        NotFoundError           → 404 {"status": "fail"}
        RequestValidationError  → 422 {"status": "fail"}
        StorageError            → 500 {"status": "fail"} (cause included)
        Exception (fallback)    → 500 {"status": "fail"}
    """

    @app.exception_handler(DuplicateTitleError)
    async def handle_duplicate_title(request: Request, exc: DuplicateTitleError):
        rid = request_id_var.get("")
        logger.info("[%s] Duplicate title: %r", rid, exc.title)
        return JSONResponse(
            status_code=409,
            content={"status": "fail", "message": exc.message},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"status": "fail", "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors(), exclude={"ctx", "input", "url"})
        fields = ", ".join(
            ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            for err in errors
        )
        return JSONResponse(
            status_code=422,
            content={
                "status": "fail",
                "message": f"Invalid request: {fields}" if fields else "Invalid request",
                "errors": errors,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.cause, exc.context)
        return JSONResponse(
            status_code=500,
            content={"status": "fail", "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "status": "fail",
                "message": "An unexpected error occurred. Please try again or contact support.",
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: an already-built handle (tests, embedding). When omitted
                  the lifespan builds one from settings.
    """
    app = FastAPI(
        title="NoteShelf API",
        description="Create and page through notes stored in a relational table.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # Middleware executes in REVERSE order of addition:
    # RequestID → NoteAccessLog → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(NoteAccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
