"""In-memory repositories for tests and local experiments."""
from datetime import datetime

from scribo.models.base import utcnow
from scribo.repositories.base import SubscriptionRepository, UsageRepository
from scribo.schemas.subscription import SubscriptionRecord, SubscriptionRecordCreate
from scribo.schemas.usage_record import UsageRecord


class InMemoryUsageRepository(UsageRepository):
    """Usage counters kept in a dict keyed by user ID."""

    def __init__(self) -> None:
        self.records: dict[str, UsageRecord] = {}

    async def get(self, user_id: str) -> UsageRecord | None:
        record = self.records.get(user_id)
        return record.model_copy() if record else None

    async def increment(self, user_id: str) -> UsageRecord:
        now = utcnow()
        record = self.records.get(user_id)
        if record is None:
            record = UsageRecord(user_id=user_id, count=1, created_at=now, updated_at=now)
        else:
            record = record.model_copy(update={"count": record.count + 1, "updated_at": now})
        self.records[user_id] = record
        return record.model_copy()

    async def commit(self) -> None:
        pass


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Subscription records kept in a dict keyed by user ID."""

    def __init__(self) -> None:
        self.records: dict[str, SubscriptionRecord] = {}

    async def get_by_user_id(self, user_id: str) -> SubscriptionRecord | None:
        record = self.records.get(user_id)
        return record.model_copy() if record else None

    async def upsert(self, record: SubscriptionRecordCreate) -> SubscriptionRecord:
        now = utcnow()
        existing = self.records.get(record.user_id)
        stored = SubscriptionRecord(
            **record.model_dump(),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.records[record.user_id] = stored
        return stored.model_copy()

    async def update_by_subscription_id(
        self,
        stripe_subscription_id: str,
        stripe_price_id: str,
        stripe_current_period_end: datetime,
    ) -> SubscriptionRecord | None:
        for user_id, record in self.records.items():
            if record.stripe_subscription_id == stripe_subscription_id:
                updated = record.model_copy(
                    update={
                        "stripe_price_id": stripe_price_id,
                        "stripe_current_period_end": stripe_current_period_end,
                        "updated_at": utcnow(),
                    }
                )
                self.records[user_id] = updated
                return updated.model_copy()
        return None

    async def commit(self) -> None:
        pass
