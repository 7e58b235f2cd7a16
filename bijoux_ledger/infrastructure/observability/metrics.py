"""Prometheus metrics for settlements, collected money, resets and inventory sync"""

from prometheus_client import Counter, Histogram

# Settlement metrics
settlement_counter = Counter(
    "bijoux_settlement_total",
    "Payments applied to debts",
    ["outcome"],  # full | partial | cost_basis
)

settlement_conflict_counter = Counter(
    "bijoux_settlement_conflicts_total",
    "Conditional debt updates that lost a race and were retried",
)

collected_amount_counter = Counter(
    "bijoux_collected_cents_total",
    "Money received from customers, in cents",
    ["source"],  # debt | sale
)

# Side effects
secondary_failure_counter = Counter(
    "bijoux_secondary_effect_failures_total",
    "Side effects that failed after a committed settlement or sale",
    ["effect"],
)

# Maintenance
reset_counter = Counter(
    "bijoux_reset_total",
    "Maintenance resets performed",
    ["scope"],  # money | cycle | factory
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_settlement(outcome: str, collected_cents: int) -> None:
    """Record settlement outcome and money received"""
    settlement_counter.labels(outcome=outcome).inc()
    collected_amount_counter.labels(source="debt").inc(collected_cents)
