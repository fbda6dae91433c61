"""Prometheus metrics for reconciliation outcomes, debt activity, and outbound calls"""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconciliation_run_counter = Counter(
    "accountability_reconciliation_runs_total",
    "Nightly reconciliation runs",
    ["outcome"],  # succeeded | failed
)

reconciliation_duration_histogram = Histogram(
    "accountability_reconciliation_duration_seconds",
    "Wall time of a full reconciliation run",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# Debt metrics
debt_created_counter = Counter(
    "accountability_debts_created_total",
    "Debts assigned",
    ["source"],  # missed_cardio | manual
)

interest_charged_counter = Counter(
    "accountability_interest_charged_dollars_total",
    "Interest added to active debts, in dollars",
)

# Record store metrics
store_request_failures_counter = Counter(
    "record_store_failures_total",
    "Failed record store calls",
    ["reason"],  # timeout | http_status | network | invalid_body
)

# Notification metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Webhook notification response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "notification_failures_total",
    "Failed webhook notification attempts",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_reconciliation(succeeded: bool, duration_seconds: float) -> None:
    """Record run outcome and duration"""
    outcome = "succeeded" if succeeded else "failed"
    reconciliation_run_counter.labels(outcome=outcome).inc()
    reconciliation_duration_histogram.observe(duration_seconds)
