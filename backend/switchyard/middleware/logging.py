"""
Switchyard — Request Logging Middleware
========================================

What:  One access-log line per HTTP request and response.
How:   Logs method, the client-facing URL, status, duration and client IP
       once the response is ready.
When:  Runs inside ForwardedHeadersMiddleware, so the logged scheme and host
       are the ones reported by a trusted proxy, not the proxy's own.

Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies and headers are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("switchyard.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        url = str(request.url)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            method,
            url,
            status,
            duration_ms,
            client_ip,
            extra={
                "method": method,
                "url": url,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
