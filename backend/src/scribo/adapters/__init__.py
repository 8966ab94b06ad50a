"""Clients for the external generation and payment providers."""
