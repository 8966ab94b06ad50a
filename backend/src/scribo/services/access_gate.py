"""Allow/deny decision for generation requests."""
from dataclasses import dataclass

from scribo.services.subscription_service import SubscriptionService
from scribo.services.usage_service import UsageService


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating the gate for one request."""

    has_free_quota: bool
    is_subscribed: bool

    @property
    def allowed(self) -> bool:
        return self.has_free_quota or self.is_subscribed

    @property
    def tier(self) -> str:
        return "pro" if self.is_subscribed else "free"


class AccessGate:
    """
    Combines the free-tier counter and subscription status.

    Stateless; every request is evaluated on its own. Callers record usage via
    ``record_usage`` after the gated operation succeeds so subscribers never
    consume free quota.
    """

    def __init__(self, usage_service: UsageService, subscription_service: SubscriptionService):
        self.usage_service = usage_service
        self.subscription_service = subscription_service

    async def evaluate(self, user_id: str) -> AccessDecision:
        has_free_quota = await self.usage_service.check_limit(user_id)
        is_subscribed = await self.subscription_service.is_active(user_id)
        return AccessDecision(has_free_quota=has_free_quota, is_subscribed=is_subscribed)

    async def allow(self, user_id: str) -> bool:
        """Return True if the user has free quota left or an active subscription."""
        decision = await self.evaluate(user_id)
        return decision.allowed

    async def record_usage(self, user_id: str, decision: AccessDecision) -> None:
        """Count a completed generation against the free tier of non-subscribers."""
        if not decision.is_subscribed:
            await self.usage_service.increment(user_id)
