"""
Switchyard — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds every dispatch collaborator from
       Settings and wires them into a FastAPI instance.
Who:   Called by uvicorn (`uvicorn switchyard.main:app`) or `python -m switchyard`.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌───────────────────┐ ┌─────────────────┐               │
    │  │ Forwarded Headers │→│ Request Logging │→ Router       │
    │  └───────────────────┘ └─────────────────┘               │
    │                                                          │
    │  Router:                                                 │
    │  ┌──────────────┐ ┌─────────────────────────────────┐    │
    │  │ GET /health  │ │ default → NotFoundHandler runner │    │
    │  └──────────────┘ └─────────────────────────────────┘    │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ SwitchyardError → JSON │ Exception → ErrorReporter │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from switchyard import __version__
from switchyard.config import Settings
from switchyard.config import settings as default_settings
from switchyard.exceptions import SwitchyardError
from switchyard.factories import (
    create_emitter_stack,
    create_error_reporter,
    create_not_found_handler,
    create_request_filter,
    create_template_renderer,
)
from switchyard.http.request_factory import create_server_request_factory
from switchyard.middleware.forwarded_headers import ForwardedHeadersMiddleware
from switchyard.middleware.logging import RequestLoggingMiddleware
from switchyard.routes import health
from switchyard.runner import RequestHandlerRunner

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
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

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Switchyard %s starting up...", __version__)

    request_filter = app.state.request_filter
    if request_filter.trusts_any:
        logger.warning("Trusting X-Forwarded-* headers from ANY remote address")
    elif request_filter.networks and request_filter.trusted_headers:
        logger.info(
            "Trusting %s from %s",
            ", ".join(request_filter.trusted_headers),
            ", ".join(str(n) for n in request_filter.networks),
        )
    else:
        logger.info("X-Forwarded-* headers are not trusted")

    if settings.templates_dir:
        logger.info("Not-found responses rendered from %s", settings.not_found_template)
    else:
        logger.info("Not-found responses are plain text")
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Handler hierarchy:
        SwitchyardError (base)  → JSON body with the error's status code
        Exception (fallback)    → ErrorReporter (JSON / HTML page / generic 500)
    """

    @app.exception_handler(SwitchyardError)
    async def handle_switchyard_error(request: Request, exc: SwitchyardError):
        logger.error("%s: %s | Context: %s", type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "server_error",
                "message": exc.message,
            },
        )

    app.add_exception_handler(Exception, create_error_reporter(settings))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Every collaborator is built from `settings` here, so malformed
    configuration fails while creating the app rather than per request.
    Tests pass their own Settings; uvicorn uses the module-level singleton.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Switchyard",
        version=__version__,
        lifespan=lifespan,
    )

    emitters = create_emitter_stack()
    request_filter = create_request_filter(settings.x_forwarded)
    not_found_handler = create_not_found_handler(settings, create_template_renderer(settings))

    app.state.settings = settings
    app.state.emitters = emitters
    app.state.request_filter = request_filter
    app.state.not_found_handler = not_found_handler

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: forwarded headers are applied before logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        ForwardedHeadersMiddleware,
        request_factory=create_server_request_factory(request_filter),
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, settings)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)

    # Unmatched requests: the scope is already filtered by the middleware
    app.router.default = RequestHandlerRunner(not_found_handler, emitters)

    return app


app = create_app()
