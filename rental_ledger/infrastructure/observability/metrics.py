"""Prometheus metrics for report volume, risk distribution and data-source health"""

from prometheus_client import Counter, Histogram

# Report metrics
report_counter = Counter(
    "rental_ledger_report_total",
    "Reports rendered",
    ["report"],  # rental_balance | customer_risk | monthly_revenue | monthly_collections | dashboard | debtors | vehicle_revenue | vehicle_income
)

risk_tier_counter = Counter(
    "rental_ledger_risk_tier_total",
    "Rental risk tiers evaluated for balance lookups",
    ["tier"],
)

customer_risk_bucket_counter = Counter(
    "rental_ledger_customer_risk_bucket",
    "Customer risk scores by bucket",
    ["bucket"],  # 0 | 1-30 | 31-60 | 61-100
)

malformed_contract_counter = Counter(
    "rental_ledger_malformed_contract_total",
    "Contracts rejected by revenue attribution",
)

# Snapshot source metrics
snapshot_fetch_failures_counter = Counter(
    "snapshot_fetch_failures_total",
    "Failed back-office snapshot fetches",
)

snapshot_size_histogram = Histogram(
    "snapshot_contracts",
    "Contracts per loaded snapshot",
    buckets=[1, 10, 100, 500, 1000, 2500, 5000, 10000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_customer_risk(risk_score: int) -> None:
    """Record customer risk distribution"""
    if risk_score == 0:
        bucket = "0"
    elif risk_score <= 30:
        bucket = "1-30"
    elif risk_score <= 60:
        bucket = "31-60"
    else:
        bucket = "61-100"

    customer_risk_bucket_counter.labels(bucket=bucket).inc()
