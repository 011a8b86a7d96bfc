"""Prometheus metrics for record activity, logins and request latency"""

from prometheus_client import Counter, Histogram

# Ledger metrics
record_change_counter = Counter(
    "bill_tracker_record_changes_total",
    "Ledger records created, updated or deleted",
    ["kind", "action"],  # income | expense | credit_card ; create | update | delete
)

# Auth metrics
login_attempt_counter = Counter(
    "bill_tracker_login_attempts_total",
    "Login attempts by outcome",
    ["outcome"],  # success | failure
)

# Dashboard metrics
dashboard_duration_histogram = Histogram(
    "bill_tracker_dashboard_seconds",
    "Time spent loading and aggregating a dashboard",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_change(kind: str, action: str) -> None:
    """Count a write to one of the ledgers"""
    record_change_counter.labels(kind=kind, action=action).inc()


def record_login(success: bool) -> None:
    login_attempt_counter.labels(outcome="success" if success else "failure").inc()
