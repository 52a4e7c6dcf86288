"""FastAPI application factory."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from movebridge.config import get_settings
from movebridge.ledger.database import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await close_db()


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Mirror string details under ``error``, the key web clients read."""
    if not isinstance(exc.detail, str):
        return await http_exception_handler(request, exc)
    return JSONResponse(
        {"detail": exc.detail, "error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled errors and answer with a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"detail": "Unexpected error", "error": "Unexpected error"}, status_code=500)


async def log_requests(request: Request, call_next):
    """Log method, path, status and latency for every request."""
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            status_code,
            elapsed_ms,
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="movebridge API",
        description="Fiat and stablecoin balance API backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(log_requests)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Register routes
    from movebridge.api.routes import health, onboarding
    from movebridge.web.controllers import balances_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(onboarding.router, tags=["Onboarding"])
    app.include_router(balances_router, tags=["Balances"])

    return app


# Default app instance
app = create_app()
