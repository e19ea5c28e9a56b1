"""
Example API — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting
       and error handling in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn example_api.main:app`) and the fixture harness, which
       builds a fresh app for every fixture it replays.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌─────────────────┐               │
    │  │   Req ID     │→│  Logging        │               │
    │  └──────────────┘ └─────────────────┘               │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌──────────────────────┐  │
    │  │ GET /api/examples/id │ │ POST /api/examples   │  │
    │  └──────────────────────┘ └──────────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ Auth→401/403 │ Unexpected→500 │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  State: settings, id_generator                      │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from example_api import __version__
from example_api.config import Settings, settings as default_settings
from example_api.exceptions import (
    AuthenticationError,
    ExampleApiError,
    NotFoundError,
)
from example_api.middleware.logging import RequestLoggingMiddleware
from example_api.middleware.request_id import RequestIDMiddleware, request_id_var
from example_api.routes import examples
from example_api.services.id_generator import IdGenerator, RandomIdGenerator

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging and report the effective policy. Shutdown: log."""
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Example API %s starting up...", __version__)
    logger.info(
        "Auth token check: %s; id range: [%d, %d]",
        "enabled" if app_settings.auth_token else "disabled",
        app_settings.id_min,
        app_settings.id_max,
    )
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)

    yield

    logger.info("Example API shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        NotFoundError        → 404 Not Found
        AuthenticationError  → 403 / 401 (status carried by the exception)
        ExampleApiError      → 500 Internal Server Error (catch-all for custom)
        Exception (fallback) → 500 Internal Server Error (unexpected errors)

    Responses never include stack traces; those go to the server log.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Requested resource doesn't exist."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Authentication failed: %s", rid, exc.context.get("reason"))
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "invalid_credentials",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ExampleApiError)
    async def handle_example_api_error(request: Request, exc: ExampleApiError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all for truly unexpected errors; stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    id_generator: Optional[IdGenerator] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Overrides the module-level settings singleton.
        id_generator: Overrides the random id source of POST /api/examples.
                      Tests pass a SequenceIdGenerator here.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = settings or default_settings

    app = FastAPI(
        title="Example API",
        description="Minimal example resource API with markdown fixture replay tests.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.id_generator = id_generator or RandomIdGenerator(
        low=app_settings.id_min,
        high=app_settings.id_max,
        seed=app_settings.id_seed,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID runs first so the logging middleware sees the ID.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(examples.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `example_api.main:app` to be importable
app = create_app()
