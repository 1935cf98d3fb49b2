"""
REST and GraphQL API entry point.

FastAPI application serving the Flugzeug REST resource under ``/rest``
and the GraphQL endpoint under ``/graphql``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import structlog

from flugzeug.config import get_settings
from flugzeug.domain.exceptions import (
    DomainException,
    FlugzeugNotFoundError,
    VersionException,
)
from flugzeug.infrastructure.database import init_database, close_database
from flugzeug.infrastructure.notifications import close_mail_service

from .graphql import create_graphql_router
from .routes import flugzeug_read_router, flugzeug_write_router
from .middleware import (
    APIKeyMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

logger = structlog.get_logger(__name__)


def setup_logging() -> None:
    """Configure structured logging."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
            if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )

    # Suppress noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.ERROR)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain error."""
    if isinstance(exc, FlugzeugNotFoundError):
        return 404
    if isinstance(exc, VersionException):
        return 412
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    # Startup
    await init_database()
    logger.info("API started")

    yield

    # Shutdown
    await close_mail_service()
    await close_database()
    logger.info("API stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    setup_logging()

    is_production = settings.environment == "production"
    app = FastAPI(
        title=settings.app_name,
        description="REST- und GraphQL-Schnittstelle fuer Flugzeuge",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if is_production else "/api/docs",
        redoc_url=None if is_production else "/api/redoc",
        openapi_url=None if is_production else "/api/openapi.json",
    )

    # CORS: use configured origins (default "*" for dev, restrict in production)
    cors_origins = [
        o.strip()
        for o in settings.security.cors_allowed_origins.split(",")
        if o.strip()
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag", "Location"],
    )

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # API Key authentication
    app.add_middleware(APIKeyMiddleware)

    # Request logging with response time
    app.add_middleware(RequestLoggingMiddleware)

    # Include routers
    app.include_router(flugzeug_read_router, prefix="/rest", tags=["Flugzeug REST-API"])
    app.include_router(flugzeug_write_router, prefix="/rest", tags=["Flugzeug REST-API"])
    app.include_router(create_graphql_router(), prefix="/graphql", tags=["GraphQL"])

    # Health check
    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "ok"}

    # Exception handlers
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        status_code = status_for(exc)
        logger.debug(
            "Domain error",
            path=request.url.path,
            code=exc.code,
            status=status_code,
            error=exc.message,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "flugzeug.presentation.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
