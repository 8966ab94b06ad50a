"""Caller identity verification."""
