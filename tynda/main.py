"""
Tynda Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the shared Database handle,
       registers middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn tynda.main:app`) and the test suite, which calls
       create_app() with its own Database.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: RequestID → Logging → Session → GZip   │
    │                                                     │
    │  Routes:                                            │
    │   /api/tracks   /api/playlists   /api/admin         │
    │   /api/auth     /health                             │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400  Auth→401  Forbidden→403           │
    │   NotFound→404    Database/unexpected→500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → optional schema creation →
              optional super-admin bootstrap
    Shutdown: dispose the Database handle (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from tynda import __version__
from tynda.config import Settings, settings
from tynda.database import Database
from tynda.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    TyndaError,
    ValidationError,
)
from tynda.middleware.logging import RequestLoggingMiddleware
from tynda.middleware.request_id import RequestIDMiddleware, request_id_var
from tynda.routes import admin, auth, health, playlists, tracks
from tynda.services.auth_service import AuthService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] tynda.services.track_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Tynda Backend starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Development defaults are allowed; make them loud
        logger.warning("Configuration warning: %s", str(e))

    if app_settings.db_create_tables:
        await database.create_all()

    if app_settings.super_admin_password:
        async with database.session() as session:
            service = AuthService(
                session,
                super_admin_email=app_settings.super_admin_email,
                bcrypt_rounds=app_settings.bcrypt_rounds,
            )
            await service.ensure_super_admin(
                app_settings.super_admin_password,
                username=app_settings.super_admin_username,
            )

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Tynda Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Condense pydantic's error list into one client-readable sentence."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ())[1:])
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "Invalid request: " + "; ".join(parts) if parts else "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to `{"error": ..., "request_id": ...}` responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        AuthenticationError                      → 401
        AuthorizationError                       → 403
        NotFoundError                            → 404
        DatabaseError                            → 500 (generic message)
        TyndaError (base)                        → its status_code
        HTTPException (routing 404/405)          → its status_code

    Anything else is turned into a 500 by RequestIDMiddleware so the
    response still carries the request id.

    Internal details (SQL, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = _describe_validation_errors(exc)
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, exc.message)

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        logger.warning("[%s] Forbidden: %s", request_id_var.get(""), exc.message)
        return _error_response(403, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "Server error")

    @app.exception_handler(TyndaError)
    async def handle_app_error(request: Request, exc: TyndaError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Shared store handle; built from settings when omitted.
        app_settings: Settings to run with; the module singleton by default.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Tynda API",
        description="Music catalog backend: tracks, playlists, users and admin tools.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database or Database.from_settings(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → Session → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret,
        session_cookie=app_settings.session_cookie,
        max_age=app_settings.session_max_age,
        same_site="lax",
        https_only=app_settings.session_https_only,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(tracks.router)
    app.include_router(playlists.router)
    app.include_router(admin.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


app = create_app()
