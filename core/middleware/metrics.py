"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import (
    http_request_duration_seconds,
    http_requests_total,
)

_PRODUCT_PATH = re.compile(r"(/products)/(?!totals/?$)[^/]+(/rename)?/?$")
_NUMERIC_ID = re.compile(r"/\d+")


def normalize_endpoint(path: str) -> str:
    """Collapse ids and product names so label cardinality stays bounded."""
    endpoint = _NUMERIC_ID.sub("/{id}", path)
    return _PRODUCT_PATH.sub(lambda m: f"{m.group(1)}/{{name}}{m.group(2) or ''}", endpoint)


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()
        endpoint = normalize_endpoint(request.path)
        status_code = 500

        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.time() - start_time)
