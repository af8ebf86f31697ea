"""Request logging middleware."""

import asyncio
import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context for structlog and log each request's outcome.

    A client that disconnects cancels the request task; the cancellation is
    logged and propagated. A gateway call already sent is not undone.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=getattr(request.state, "request_id", "unknown"),
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except asyncio.CancelledError:
            logger.info("request_cancelled", duration_ms=_elapsed_ms(start))
            raise
        except Exception as exc:
            logger.error("request_failed", error=str(exc), duration_ms=_elapsed_ms(start))
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log("request_completed", status_code=response.status_code, duration_ms=_elapsed_ms(start))
        return response
