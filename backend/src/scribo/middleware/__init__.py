"""HTTP middleware: request logging and Prometheus metrics."""
