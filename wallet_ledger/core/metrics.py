"""Prometheus metrics for the Wallet Ledger service.

Ledger Metrics:
- wallet_ledger_operations_total: Ledger mutations by operation and outcome
- wallet_ledger_operation_latency_seconds: Ledger mutation latency
- wallet_ledger_conflicts_total: Optimistic-concurrency conflicts (each retry)
- wallet_ledger_amount_total: Money moved through the ledger by kind

Read Metrics:
- wallet_statistics_requests_total: Statistics computations
- wallet_statement_requests_total: Statement reads by view

Technical Metrics:
- wallet_http_requests_total: HTTP requests by endpoint/status
- wallet_http_request_latency_seconds: HTTP latency by endpoint
"""

import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Ledger Metrics
# =============================================================================

ledger_operations_total = Counter(
    "wallet_ledger_operations_total",
    "Total number of ledger mutations",
    ["operation", "outcome"],  # create/update/delete, success/error code
)

ledger_operation_latency = Histogram(
    "wallet_ledger_operation_latency_seconds",
    "Ledger mutation latency in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

ledger_conflicts_total = Counter(
    "wallet_ledger_conflicts_total",
    "Total number of concurrent balance write conflicts",
    ["operation"],
)

ledger_amount_total = Counter(
    "wallet_ledger_amount_total",
    "Total amount recorded through the ledger",
    ["kind"],  # credit, debit
)


# =============================================================================
# Read Metrics
# =============================================================================

statistics_requests_total = Counter(
    "wallet_statistics_requests_total",
    "Total number of statistics computations",
    ["period"],  # month, all
)

statement_requests_total = Counter(
    "wallet_statement_requests_total",
    "Total number of statement reads",
    ["view"],  # list, grouped, months
)


# =============================================================================
# Technical Metrics
# =============================================================================

http_requests_total = Counter(
    "wallet_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "wallet_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_ledger_operation(operation: str, outcome: str) -> None:
    """Record the outcome of a ledger mutation."""
    ledger_operations_total.labels(operation=operation, outcome=outcome).inc()


def record_ledger_conflict(operation: str) -> None:
    """Record a balance write that lost a concurrency race."""
    ledger_conflicts_total.labels(operation=operation).inc()


def record_ledger_amount(kind: str, amount: Decimal) -> None:
    """Record money moved through the ledger."""
    ledger_amount_total.labels(kind=kind).inc(float(abs(amount)))


@contextmanager
def track_ledger_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track ledger mutation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        ledger_operation_latency.labels(operation=operation).observe(duration)


def record_statistics_request(filtered: bool) -> None:
    statistics_requests_total.labels(period="month" if filtered else "all").inc()


def record_statement_request(view: str) -> None:
    statement_requests_total.labels(view=view).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
