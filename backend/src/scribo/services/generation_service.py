"""Gated execution of generation provider calls."""
from typing import Awaitable, Callable, TypeVar

import structlog

from scribo.exceptions import InternalError, QuotaExceeded
from scribo.metrics import generation_failures_total, generations_total, quota_denials_total
from scribo.services.access_gate import AccessGate
from scribo.tracing import get_tracer

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

T = TypeVar("T")


class GenerationService:
    """Runs a provider call behind the access gate and meters free usage."""

    def __init__(self, access_gate: AccessGate):
        self.access_gate = access_gate

    async def run(self, user_id: str, kind: str, call: Callable[[], Awaitable[T]]) -> T:
        """
        Execute one generation for a user.

        The gate is evaluated first; the provider is only invoked when it
        allows the request. Non-subscribers are charged one free generation
        after the provider returns successfully.

        Args:
            user_id: Caller's user ID
            kind: Generation kind used for logs and metrics (conversation, image, video)
            call: Zero-argument coroutine factory performing the provider request

        Returns:
            The provider result, unchanged

        Raises:
            QuotaExceeded: If the user has no free quota and no active subscription
            InternalError: If the gate lookup, provider call or usage update fails
        """
        try:
            decision = await self.access_gate.evaluate(user_id)
        except Exception as exc:
            logger.exception("access_gate_failed", kind=kind, user_id=user_id, error_type=type(exc).__name__)
            raise InternalError() from exc

        if not decision.allowed:
            quota_denials_total.labels(kind=kind).inc()
            logger.info("quota_exceeded", kind=kind, user_id=user_id)
            raise QuotaExceeded()

        try:
            with tracer.start_as_current_span(f"generation.{kind}") as span:
                span.set_attribute("scribo.tier", decision.tier)
                result = await call()
            await self.access_gate.record_usage(user_id, decision)
        except Exception as exc:
            generation_failures_total.labels(kind=kind).inc()
            logger.exception("generation_failed", kind=kind, user_id=user_id, error_type=type(exc).__name__)
            raise InternalError() from exc

        generations_total.labels(kind=kind, tier=decision.tier).inc()
        logger.info("generation_completed", kind=kind, user_id=user_id, tier=decision.tier)
        return result
