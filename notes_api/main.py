"""
Notes API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn notes_api.main:app`) and the `notes-api` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      /notes  /notes/{id}  /health          │
    │                                                     │
    │  Exception Handlers:                                │
    │   ValidationError / InvalidIdError → 400            │
    │   NotFoundError → 404                               │
    │   StoreUnavailableError / Exception → 500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Build the NoteStore and open it (retry with backoff, then fail fast)
    3. Park the store on app.state for the get_note_store dependency

    Shutdown:
    1. Close the NoteStore (dispose engine and pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.config import Settings, settings
from notes_api.exceptions import (
    InvalidIdError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from notes_api.routes import health, notes
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something broke!"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: 2026-01-15T12:00:00 [INFO] notes_api.access: GET /notes 200 3.1ms [a1b2c3d4] from 127.0.0.1
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the NoteStore on startup and close it on shutdown.

    If the database stays unreachable after `db_connect_attempts` tries,
    startup is aborted: the server never accepts requests it cannot serve.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Notes API %s starting up...", __version__)

    store = NoteStore.from_settings(app_settings)
    try:
        await store.open(
            attempts=app_settings.db_connect_attempts,
            min_wait=app_settings.db_connect_min_wait,
            max_wait=app_settings.db_connect_max_wait,
        )
    except StoreUnavailableError as e:
        logger.error(
            "Database unreachable after %d attempts, aborting startup | Context: %s",
            app_settings.db_connect_attempts,
            e.context,
        )
        await store.close()
        raise

    app.state.note_store = store
    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Notes API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    Correlation ID of `request`.

    The catch-all handler runs outside RequestIDMiddleware, where the
    ContextVar is unset; request.state shares the per-request scope.
    """
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_response(request: Request, status_code: int, error: str, msg: str) -> JSONResponse:
    rid = _request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={"msg": msg, "error": error, "request_id": rid},
        headers={REQUEST_ID_HEADER: rid} if rid else None,
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Turn pydantic's error list into one short client-facing sentence."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        where = ".".join(loc) or "body"
        parts.append(f"{where}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map typed store errors to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → 400 validation_error
        ValidationError         → 400 validation_error
        InvalidIdError          → 400 invalid_id
        NotFoundError           → 404 not_found
        StoreUnavailableError   → 500 store_unavailable (generic message)
        Exception (fallback)    → 500 internal_server_error "Something broke!"

    Security: handlers never put stack traces or driver messages in the
    response body; those are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        msg = _describe_validation_errors(exc)
        logger.warning("[%s] Request validation error: %s", _request_id(request), msg)
        return _error_response(request, 400, "validation_error", msg)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error_response(request, 400, "validation_error", exc.message)

    @app.exception_handler(InvalidIdError)
    async def handle_invalid_id(request: Request, exc: InvalidIdError):
        return _error_response(request, 400, "invalid_id", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return _error_response(request, 500, "store_unavailable", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=exc,
        )
        return _error_response(request, 500, "internal_server_error", GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to run with; defaults to the environment-loaded singleton.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Notes API",
        description="Create, read, update and delete short text notes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Execution order is the reverse of registration:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    uvicorn.run(
        "notes_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `notes_api.main:app` to be importable
app = create_app()
