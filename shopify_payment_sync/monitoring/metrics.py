"""
Prometheus metrics for the payment sync.

Tracks:
- Reconciliation outcomes by status and reason
- Shopify order fetch duration
- PayPal payments created
"""
from prometheus_client import Counter, Histogram

reconciliation_outcomes_total = Counter(
    "payment_sync_outcomes_total",
    "Total reconciliation outcomes",
    ["status", "reason"],
)

shopify_fetch_duration_seconds = Histogram(
    "payment_sync_shopify_fetch_duration_seconds",
    "Shopify order fetch duration in seconds",
    ["status"],  # found, not_found, error
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0),
)

paypal_payments_created_total = Counter(
    "payment_sync_paypal_payments_created_total",
    "Total PayPal payments created in plentymarkets",
    ["currency"],
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_outcome(status: str, reason: str) -> None:
        """Record a reconciliation outcome."""
        reconciliation_outcomes_total.labels(status=status, reason=reason).inc()

    @staticmethod
    def record_shopify_fetch(status: str, duration_seconds: float) -> None:
        """Record a Shopify order fetch."""
        shopify_fetch_duration_seconds.labels(status=status).observe(duration_seconds)

    @staticmethod
    def record_payment_created(currency: str) -> None:
        """Record a created PayPal payment."""
        paypal_payments_created_total.labels(currency=currency).inc()


# Export singleton instance
metrics = MetricsCollector()
