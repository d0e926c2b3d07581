"""Request ID + access log middleware.

Every HTTP request gets an ID, taken from an incoming X-Request-ID header
(so the backend's own trace ID carries through) or generated. The ID is
bound to structlog's contextvars, so the broadcast log lines for a
request share it, and it is echoed back in the response header.

WebSocket traffic is not HTTP and passes through untouched.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log how it went."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(HEADER) or uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers[HEADER] = request_id

        logger.info(
            "relay.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
