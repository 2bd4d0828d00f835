"""
FastAPI middleware for observability.

Binds a correlation ID to every request and writes one access line per
request. Conversion endpoints stream their bodies, so the recorded duration
is time until response headers, not until the last SSE frame.

Dependencies: fastapi, starlette, pagecraft.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pagecraft.observability.correlation import clear_correlation_id, set_correlation_id
from pagecraft.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATH_SUFFIXES = ("/health", "/health/model")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with status, duration and streaming flag."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        level = logging.DEBUG if path.endswith(QUIET_PATH_SUFFIXES) else logging.INFO
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"{request.method} {path} - unhandled {type(e).__name__}",
                exc=e,
                method=request.method,
                path=path,
                elapsed_ms=_elapsed_ms(started),
            )
            raise

        log_with_context(
            logger,
            level,
            f"{request.method} {path} - {response.status_code}",
            method=request.method,
            path=path,
            status_code=response.status_code,
            elapsed_ms=_elapsed_ms(started),
            streaming=response.headers.get("content-type", "").startswith("text/event-stream"),
            content_length=request.headers.get("content-length"),
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID injection."""

    async def dispatch(self, request: Request, call_next):
        """
        Bind a correlation ID to the request context and echo it back.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
