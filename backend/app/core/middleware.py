"""
Request logging middleware: binds a request id into the structlog context
and logs one line per completed (or failed) request.
"""

import time
import uuid
from typing import Callable

import structlog
from app.core.logging import get_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Honour an id set by a proxy so logs can be correlated across hops
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
