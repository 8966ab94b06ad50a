"""Subscription status derived from stored billing periods."""
from datetime import datetime, timedelta, timezone

from scribo.constants import SUBSCRIPTION_GRACE_PERIOD
from scribo.repositories.base import SubscriptionRepository
from scribo.schemas.subscription import SubscriptionRecord


class SubscriptionService:
    """Read-only view over subscription records."""

    def __init__(self, repository: SubscriptionRepository, grace_period: timedelta = SUBSCRIPTION_GRACE_PERIOD):
        """Initialize subscription service with its record store."""
        self.repository = repository
        self.grace_period = grace_period

    async def get_subscription(self, user_id: str) -> SubscriptionRecord | None:
        """Return the stored subscription of a user, if any."""
        return await self.repository.get_by_user_id(user_id)

    def is_record_active(self, record: SubscriptionRecord | None, now: datetime | None = None) -> bool:
        """
        Decide whether a record grants paid access at ``now``.

        Access holds until the grace period after the billing period end has
        elapsed. A record without a price or period end never grants access.
        """
        if record is None or not record.stripe_price_id or record.stripe_current_period_end is None:
            return False

        now = now or datetime.now(timezone.utc)
        period_end = record.stripe_current_period_end
        if period_end.tzinfo is None:
            period_end = period_end.replace(tzinfo=timezone.utc)

        return period_end + self.grace_period > now

    async def is_active(self, user_id: str, now: datetime | None = None) -> bool:
        """
        Check whether a user currently holds an active paid subscription.

        Args:
            user_id: User ID
            now: Evaluation time (defaults to the current UTC time)

        Returns:
            True if the user's subscription is within its paid period plus grace
        """
        record = await self.repository.get_by_user_id(user_id)
        return self.is_record_active(record, now)
