"""
Book API — FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application and starts the server.
How:   create_app(config) returns a configured FastAPI instance;
       serve(config) binds it with uvicorn and blocks.
Who:   uvicorn (`uvicorn bookapi.main:app`), `python -m bookapi`, and tests.

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
    │  ┌──────────┐ ┌──────────────────┐ ┌─────────────┐  │
    │  │  GET /   │ │ GET /books/{id}  │ │ GET /docs   │  │
    │  └──────────┘ └──────────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ Exception→500          │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Startup:
    1. Configure logging (module import, before the module-level app is built)
    2. Build the OpenAPI document from the API specification declaration
    3. Check the declaration against the registered routes
       (warning per mismatch, ApiSpecError in strict mode)
    4. Once uvicorn has bound its sockets, log the listen address and docs URL
       (BookAPIServer.startup)
"""

import logging
import socket
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookapi.api_spec import API_SPECS
from bookapi.config import Settings, settings
from bookapi.exceptions import BookAPIError, ValidationError
from bookapi.middleware.logging import RequestLoggingMiddleware
from bookapi.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    current_request_id,
)
from bookapi.openapi import build_openapi_document, check_routes, include_router
from bookapi.routes import books, docs, root

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Nothing to allocate or release; marks the lifecycle in the logs."""
    logger.info("Book API starting up...")

    yield

    logger.info("Book API shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Server
# ══════════════════════════════════════════════════════════════════════════

def bound_ports(servers: Iterable) -> List[int]:
    """TCP ports of the listening sockets, in order; Unix sockets are skipped."""
    ports: List[int] = []
    for server in servers:
        for sock in server.sockets or ():
            if sock.family not in (socket.AF_INET, socket.AF_INET6):
                continue
            port = sock.getsockname()[1]
            if port not in ports:
                ports.append(port)
    return ports


class BookAPIServer(uvicorn.Server):
    """
    uvicorn server that announces the listen address after binding succeeds.

    uvicorn runs the app lifespan before it binds, and exits on a bind error
    from inside startup(), so the address is logged only when startup()
    returns with the server started.
    """

    def __init__(self, config: uvicorn.Config, docs_path: str = "/docs") -> None:
        super().__init__(config)
        self.docs_path = docs_path

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if not self.started:
            return
        for port in bound_ports(getattr(self, "servers", ())):
            logger.info("Server running at http://localhost:%d", port)
            logger.info("API docs: http://localhost:%d%s", port, self.docs_path)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError       → 400 Bad Request
        BookAPIError (base)   → 500 Internal Server Error
        Exception (fallback)  → 500 Internal Server Error

    Unmatched routes and wrong methods keep FastAPI's default 404/405.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent input we cannot interpret."""
        rid = current_request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(BookAPIError)
    async def handle_book_api_error(request: Request, exc: BookAPIError):
        rid = current_request_id(request)
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
        """Catch-all: stack trace is logged server-side only, never returned."""
        rid = current_request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
            # Runs outside RequestIDMiddleware, which never sees this response
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Settings = settings) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to build the app from; the module singleton by default.

    Returns:
        Fully configured FastAPI instance with the OpenAPI document on
        app.state.openapi_document.

    Raises:
        ApiSpecError: If the API declaration is malformed, or in strict mode
                      does not match the registered routes.
    """
    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        # The hand-built document in openapi.py replaces FastAPI's generated one
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    include_router(app, root.router)
    include_router(app, books.router)
    include_router(app, docs.router, prefix=config.docs_path)

    # ── API Documentation ─────────────────────────────────────────────────
    app.state.openapi_document = build_openapi_document(
        API_SPECS,
        title=config.api_title,
        version=config.api_version,
        description=config.api_description,
    )
    app.state.route_mismatches = check_routes(app, API_SPECS, strict=config.strict_api_spec)

    return app


def serve(config: Settings = settings) -> None:
    """
    Listen on config.host:config.port until interrupted.

    The module-level app is reused for the default settings; any other
    config gets its own app, built after logging is reconfigured for it.
    """
    if config is settings:
        application = app
    else:
        setup_logging(config.log_level)
        application = create_app(config)

    server = BookAPIServer(
        uvicorn.Config(
            application,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
        ),
        docs_path=config.docs_path,
    )
    server.run()


# Logging first, so startup warnings from create_app() use the configured format
setup_logging(settings.log_level)

# uvicorn expects `bookapi.main:app` to be importable
app = create_app()
