"""
Inkpost Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request on the `inkpost.access` logger.

Logged:      method, path, status, duration, client IP, request ID
Not logged:  request bodies (passwords) and the Authorization header

Level by status class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from inkpost.middleware.request_id import request_id_var

logger = logging.getLogger("inkpost.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path

        # Health probes run every few seconds
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
