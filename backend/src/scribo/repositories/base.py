"""Record store interfaces used by the services."""
from abc import ABC, abstractmethod
from datetime import datetime

from scribo.schemas.subscription import SubscriptionRecord, SubscriptionRecordCreate
from scribo.schemas.usage_record import UsageRecord


class UsageRepository(ABC):
    """Per-user free-tier counters."""

    @abstractmethod
    async def get(self, user_id: str) -> UsageRecord | None:
        """Return the counter for ``user_id`` or None when the user has none."""

    @abstractmethod
    async def increment(self, user_id: str) -> UsageRecord:
        """Add one to the counter, creating it with ``count=1`` when absent."""

    @abstractmethod
    async def commit(self) -> None:
        """Persist pending writes; raises if they cannot be stored."""


class SubscriptionRepository(ABC):
    """Per-user subscription records."""

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> SubscriptionRecord | None:
        """Return the subscription of ``user_id`` or None."""

    @abstractmethod
    async def upsert(self, record: SubscriptionRecordCreate) -> SubscriptionRecord:
        """Insert the record, or overwrite the existing record of the same user."""

    @abstractmethod
    async def update_by_subscription_id(
        self,
        stripe_subscription_id: str,
        stripe_price_id: str,
        stripe_current_period_end: datetime,
    ) -> SubscriptionRecord | None:
        """
        Refresh price and period end of the record holding ``stripe_subscription_id``.

        Returns:
            The updated record, or None when no record matches (nothing is created)
        """

    @abstractmethod
    async def commit(self) -> None:
        """Persist pending writes; raises if they cannot be stored."""
