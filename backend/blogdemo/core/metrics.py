"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry,
                               Counter, Histogram, generate_latest)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY


def build_registry() -> CollectorRegistry:
    """Registry to expose: a fresh one aggregating worker files in multiprocess mode"""
    if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
        multiprocess_registry = CollectorRegistry()
        MultiProcessCollector(multiprocess_registry)
        return multiprocess_registry
    return REGISTRY


registry = build_registry()

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

# ============================================================================
# Strong Parameters Metrics
# ============================================================================

unpermitted_parameters_total = Counter(
    'unpermitted_parameters_total',
    'Total number of request keys dropped by permit'
)

parameter_errors_total = Counter(
    'parameter_errors_total',
    'Total number of parameter filtering and mass assignment errors',
    ['error_type']
)


def get_metrics():
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(registry)


def get_metrics_content_type():
    return CONTENT_TYPE_LATEST
