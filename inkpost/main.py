"""
Inkpost Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) wires middleware, exception handlers and routes;
       the lifespan opens the Database handle on startup and disposes it on
       shutdown.
Who:   uvicorn (`inkpost.main:app`), `python -m inkpost`, and the test suite
       (which builds its own app with test settings).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  /api/auth   /api/posts   /api/comments   /health   │
    │  /api/admin/posts   /api/admin/comments  (gated)    │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400/422 │ Auth→401 │ NotFound→404       │
    │  Integrity→409      │ Database→500                  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → settings check → Database() → create_all()
    Shutdown: Database.dispose()
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inkpost import __version__
from inkpost.config import Settings, settings as default_settings
from inkpost.database import Database
from inkpost.exceptions import (
    AuthenticationError,
    DatabaseError,
    InkpostError,
    IntegrityViolationError,
    NotFoundError,
    ValidationError,
)
from inkpost.middleware.logging import RequestLoggingMiddleware
from inkpost.middleware.request_id import RequestIDMiddleware, request_id_var
from inkpost.routes import mount_routes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] inkpost.services.post_service: message
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request lines come from inkpost.access instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the datastore handle for the lifetime of the application.

    The handle is stored on `app.state.database`; request handlers reach it
    through the get_db_session dependency.
    """
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Inkpost Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.warning("%s", str(e))

    database = Database(settings)
    await database.create_all()
    app.state.database = database

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    try:
        yield
    finally:
        logger.info("Inkpost Backend shutting down...")
        await database.dispose()
        app.state.database = None
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(code: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": code, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse body.

        ValidationError          → 400
        RequestValidationError   → 422
        AuthenticationError      → 401 (+ WWW-Authenticate: Bearer)
        NotFoundError            → 404
        IntegrityViolationError  → 409
        DatabaseError            → 500 (generic message)
        InkpostError (base)      → 500
        Exception                → 500

    Exception `context` is logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder(
                _error_body("validation_error", "Request body or parameters are invalid", {"errors": errors})
            ),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("[%s] Authentication failed: %s | Context: %s",
                    request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthenticated", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(IntegrityViolationError)
    async def handle_integrity_violation(request: Request, exc: IntegrityViolationError):
        logger.warning("[%s] Integrity violation: %s | Context: %s",
                       request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=409,
            content=_error_body("integrity_error", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(InkpostError)
    async def handle_application_error(request: Request, exc: InkpostError):
        logger.error("[%s] Unhandled application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble a FastAPI application around `settings` (module default if omitted).

    No database connection is made here; that happens in the lifespan.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Inkpost API",
        description="Minimal blogging backend: authentication, posts and comments.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = None

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    mount_routes(app)

    return app


# uvicorn expects `inkpost.main:app` to be importable
app = create_app()
