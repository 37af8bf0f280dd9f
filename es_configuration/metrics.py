"""
Prometheus metrics for index configuration workflows
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

_remote_operations = Counter(
    "es_configuration_remote_operations_total",
    "Total remote Elasticsearch calls",
    ["operation", "status"]  # success, error
)
_documents_indexed = Counter(
    "es_configuration_documents_indexed_total",
    "Total documents indexed"
)
_cleanup_failures = Counter(
    "es_configuration_cleanup_failures_total",
    "Temporary index cleanups that failed"
)
_remote_latency = Histogram(
    "es_configuration_remote_operation_latency_seconds",
    "Latency of remote Elasticsearch calls",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0]
)
_workflow_duration = Histogram(
    "es_configuration_workflow_duration_seconds",
    "Duration of alias workflows",
    ["workflow", "status"],
    buckets=[0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0, 3600.0]
)


def start_metrics_server(port: int) -> bool:
    """Start Prometheus metrics HTTP server (for long-running reindexes)"""
    try:
        start_http_server(port)
    except OSError as e:
        logger.error("Failed to start metrics server on port %s: %s", port, e)
        return False
    logger.info("Metrics server started on port %s", port)
    return True


def inc_remote_operation(operation: str, status: str = "success"):
    """Increment remote call counter (status: success/error)"""
    _remote_operations.labels(operation=operation, status=status).inc()


def inc_documents_indexed(count: int = 1):
    """Increment indexed documents counter"""
    _documents_indexed.inc(count)


def observe_remote_latency(operation: str, seconds: float):
    _remote_latency.labels(operation=operation).observe(seconds)


def inc_cleanup_failure():
    _cleanup_failures.inc()


def observe_workflow_duration(workflow: str, status: str, seconds: float):
    """Record workflow duration (status: success/error)"""
    _workflow_duration.labels(workflow=workflow, status=status).observe(seconds)


@contextmanager
def track_latency(observe_fn: Callable[[float], None]):
    """Context manager to track operation latency"""
    start = time.time()
    try:
        yield
    finally:
        observe_fn(time.time() - start)
