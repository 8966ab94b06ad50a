"""Gated generative-AI endpoints with free-tier metering and Stripe subscriptions."""

__version__ = "0.1.0"
