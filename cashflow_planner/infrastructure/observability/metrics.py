"""Prometheus metrics for monitoring projections, spending limits and request latency"""

from prometheus_client import Counter, Histogram

# Projection metrics
projection_counter = Counter(
    "cashflow_projection_total",
    "Cashflow projections built",
    ["outcome"],  # healthy | negative
)

projection_negative_days_histogram = Histogram(
    "cashflow_projection_negative_days",
    "Projected days with a negative balance per projection",
    buckets=[0, 1, 3, 7, 14, 30, 90],
)

# Spending limit metrics
spending_limit_counter = Counter(
    "spending_limit_total",
    "Spending limit calculations",
    ["shortfall_reason"],  # none | expenses | investments | buffer | multiple
)

# Recurrence metrics
occurrences_generated_counter = Counter(
    "recurrence_occurrences_generated_total",
    "Occurrences generated from recurring templates",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_projection(negative_days: int) -> None:
    """Record projection metrics for monitoring how often users are heading below zero"""
    outcome = "negative" if negative_days > 0 else "healthy"
    projection_counter.labels(outcome=outcome).inc()
    projection_negative_days_histogram.observe(negative_days)


def record_spending_limit(shortfall_reason: str | None) -> None:
    spending_limit_counter.labels(shortfall_reason=shortfall_reason or "none").inc()


def record_occurrences(count: int) -> None:
    if count > 0:
        occurrences_generated_counter.inc(count)
