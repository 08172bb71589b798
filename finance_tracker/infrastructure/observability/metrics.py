"""Prometheus metrics for bill activity, payoff projections and aggregator calls"""

from prometheus_client import Counter, Histogram

# Bill lifecycle metrics
bill_status_counter = Counter(
    "finance_bill_status_total",
    "Bill classifications served",
    ["state"],  # paid | critical | overdue | due_today | due_soon | upcoming
)

bill_snooze_counter = Counter(
    "finance_bill_snooze_total",
    "Bills snoozed",
)

bill_import_counter = Counter(
    "finance_bill_import_rows_total",
    "Bulk import rows processed",
    ["result"],  # imported | rejected
)

# Payoff metrics
payoff_projection_counter = Counter(
    "finance_payoff_projection_total",
    "Payoff simulations run",
    ["strategy", "outcome"],  # outcome: converged | not_converged
)

# Aggregator metrics
aggregator_latency_histogram = Histogram(
    "aggregator_latency_seconds",
    "Bank aggregation proxy response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

aggregator_failure_counter = Counter(
    "aggregator_failures_total",
    "Failed aggregator proxy calls",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_statuses(states) -> None:
    """Count each derived bill state"""
    for state in states:
        bill_status_counter.labels(state=state.value).inc()


def record_projection(strategy: str, converged: bool) -> None:
    outcome = "converged" if converged else "not_converged"
    payoff_projection_counter.labels(strategy=strategy, outcome=outcome).inc()


def record_import(imported: int, rejected: int) -> None:
    if imported:
        bill_import_counter.labels(result="imported").inc(imported)
    if rejected:
        bill_import_counter.labels(result="rejected").inc(rejected)
