"""
FastAPI middleware for observability.

Correlation ID propagation and per-request access logging.

Dependencies: starlette, chatflow.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from chatflow.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with caller, status and duration."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        context = {
            "method": request.method,
            "path": request.url.path,
            "user_id": request.headers.get("X-User-Id"),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.error(
                f"{__name__}:dispatch - {route} raised {type(e).__name__} after {elapsed_ms}ms",
                extra={**context, "process_time_ms": elapsed_ms, "error_type": type(e).__name__},
            )
            raise

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{__name__}:dispatch - {route} -> {response.status_code} in {elapsed_ms}ms",
            extra={**context, "status_code": response.status_code, "process_time_ms": elapsed_ms},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID to the request context.

    Reuses the caller's X-Correlation-ID when present and echoes it on the
    response so client and server logs can be joined.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
