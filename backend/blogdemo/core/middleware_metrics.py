"""
Middleware for collecting HTTP request metrics
"""
import re
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from blogdemo.core.metrics import (http_request_duration_seconds,
                                   http_requests_total)

_ID_SEGMENT = re.compile(r"/\d+(?=\.json$|/|$)")


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics for Prometheus
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.time() - start_time
            # /articles/12.json -> /articles/{id}.json
            endpoint = _ID_SEGMENT.sub("/{id}", request.url.path)
            labels = {
                "method": request.method,
                "endpoint": endpoint,
                "status_code": str(status_code),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(duration)
