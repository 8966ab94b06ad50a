"""Business metrics for Prometheus monitoring."""
from prometheus_client import Counter

# Generation metrics
generations_total = Counter(
    "generations_total",
    "Total successful generation requests",
    labelnames=["kind", "tier"],  # kind: conversation, image, video; tier: free, pro
)

generation_failures_total = Counter(
    "generation_failures_total",
    "Total generation requests that failed at the provider",
    labelnames=["kind"],
)

quota_denials_total = Counter(
    "quota_denials_total",
    "Total generation requests denied by the free-tier gate",
    labelnames=["kind"],
)

# Billing metrics
billing_sessions_created_total = Counter(
    "billing_sessions_created_total",
    "Total Stripe sessions created",
    labelnames=["session_type"],  # checkout, portal
)

webhook_events_total = Counter(
    "webhook_events_total",
    "Total Stripe webhook events received",
    labelnames=["event_type", "outcome"],  # outcome: applied, ignored, rejected, failed
)
