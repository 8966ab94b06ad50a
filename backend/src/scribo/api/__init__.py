"""HTTP API: routers, webhooks and dependencies."""
