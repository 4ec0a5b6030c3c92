"""
Prometheus metrics for the license inventory service.

Custom metrics for business logic and performance monitoring.
"""

import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Inventory metrics
inventory_operations_total = Counter(
    "inventory_operations_total",
    "Inventory mutations applied through the external API",
    ["operation"],
)

inventory_remote_failures_total = Counter(
    "inventory_remote_failures_total",
    "Failed calls to the external inventory API",
    ["operation"],
)

inventory_validation_failures_total = Counter(
    "inventory_validation_failures_total",
    "Inventory requests rejected before any remote call",
    ["code"],
)

inventory_remote_duration_seconds = Histogram(
    "inventory_remote_duration_seconds",
    "External inventory API call duration in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)


def start_metrics_server(port: int, addr: str = "0.0.0.0") -> bool:
    """
    Expose the default registry over HTTP for Prometheus to scrape.

    Args:
        port: Port to listen on
        addr: Interface to bind

    Returns:
        True if the server was started, False if the port was taken
    """
    try:
        start_http_server(port, addr=addr)
    except OSError as e:
        logger.warning("Could not start Prometheus metrics server on %s: %s", port, e)
        return False
    logger.info("Prometheus metrics server started on %s:%s", addr, port)
    return True
