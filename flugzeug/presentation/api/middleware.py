"""API middleware.

- API key authentication (X-API-Key) for write requests
- Security headers
- Request logging

The project uses a single API key configured via Settings.security.api_key.
"""

from __future__ import annotations

import secrets
import time
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from flugzeug.config import get_settings

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "X-API-Key"


class APIKeyRejected(Exception):
    """Raised when a request carries no valid API key."""

    def __init__(self, detail: str, status_code: int = 401):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def verify_api_key(provided: Optional[str]) -> None:
    """
    Validate an API key against the configured one.

    Raises:
        APIKeyRejected: If no key is configured, or the key is missing or wrong
    """
    settings = get_settings()
    configured = settings.security.api_key.get_secret_value() if settings.security.api_key else ""

    # Require API key to be configured. Reject all writes if missing.
    if not configured:
        logger.error("API key not configured. Set SECURITY_API_KEY in environment.")
        raise APIKeyRejected("API key not configured on server", status_code=503)

    if not provided:
        raise APIKeyRejected("Missing API key")

    if not secrets.compare_digest(provided, configured):
        raise APIKeyRejected("Invalid API key")


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Middleware for API key authentication of REST write requests."""

    SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}

    # GraphQL checks the key per mutation.
    SKIP_PREFIXES = (
        "/graphql",
    )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method in self.SAFE_METHODS:
            return await call_next(request)

        if request.url.path.startswith(self.SKIP_PREFIXES):
            return await call_next(request)

        provided = request.headers.get(API_KEY_HEADER) or ""
        try:
            verify_api_key(provided)
        except APIKeyRejected as e:
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Cached responses must be revalidated against the ETag.
        response.headers.setdefault("Cache-Control", "no-cache")
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        logger.info(
            "API request completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response
