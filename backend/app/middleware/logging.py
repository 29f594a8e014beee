"""
Duet Backend — Access Log Middleware
======================================

What:  One log line per HTTP request on the `duet.access` logger.
How:   Times the downstream call and logs method, path, query, status,
       duration and request id. The level follows the status class
       (5xx → ERROR, 4xx → WARNING, otherwise INFO). Health probes are
       not logged.

Example line:
    GET /api/home?relationshipId=4 200 12.3ms [3f9a1c0b2d4e] from 10.0.0.7
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import REQUEST_ID_HEADER, request_id_var

logger = logging.getLogger("duet.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        client_ip = request.client.host if request.client else "unknown"
        target = f"{path}?{request.url.query}" if request.url.query else path
        rid = request_id_var.get("") or response.headers.get(REQUEST_ID_HEADER, "")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            target,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
