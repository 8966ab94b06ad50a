"""Business logic: usage metering, subscription status, gating and webhooks."""
