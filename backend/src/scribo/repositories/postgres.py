"""PostgreSQL-backed repositories using async SQLAlchemy."""
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from scribo.models.base import utcnow
from scribo.models.subscription import UserSubscription
from scribo.models.usage_record import UserApiLimit
from scribo.repositories.base import SubscriptionRepository, UsageRepository
from scribo.schemas.subscription import SubscriptionRecord, SubscriptionRecordCreate
from scribo.schemas.usage_record import UsageRecord


class SqlAlchemyUsageRepository(UsageRepository):
    """Usage counters stored in ``user_api_limits``."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def get(self, user_id: str) -> UsageRecord | None:
        result = await self.db.execute(
            select(UserApiLimit).where(UserApiLimit.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        return UsageRecord.model_validate(row) if row else None

    async def increment(self, user_id: str) -> UsageRecord:
        stmt = (
            insert(UserApiLimit)
            .values(user_id=user_id, count=1)
            .on_conflict_do_update(
                index_elements=[UserApiLimit.user_id],
                set_={"count": UserApiLimit.count + 1, "updated_at": utcnow()},
            )
            .returning(UserApiLimit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return UsageRecord.model_validate(result.scalar_one())

    async def commit(self) -> None:
        await self.db.commit()


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """Subscription records stored in ``user_subscriptions``."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def get_by_user_id(self, user_id: str) -> SubscriptionRecord | None:
        result = await self.db.execute(
            select(UserSubscription).where(UserSubscription.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        return SubscriptionRecord.model_validate(row) if row else None

    async def upsert(self, record: SubscriptionRecordCreate) -> SubscriptionRecord:
        values = record.model_dump()
        changes = {key: value for key, value in values.items() if key != "user_id"}
        changes["updated_at"] = utcnow()

        stmt = (
            insert(UserSubscription)
            .values(**values)
            .on_conflict_do_update(index_elements=[UserSubscription.user_id], set_=changes)
            .returning(UserSubscription)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return SubscriptionRecord.model_validate(result.scalar_one())

    async def update_by_subscription_id(
        self,
        stripe_subscription_id: str,
        stripe_price_id: str,
        stripe_current_period_end: datetime,
    ) -> SubscriptionRecord | None:
        stmt = (
            update(UserSubscription)
            .where(UserSubscription.stripe_subscription_id == stripe_subscription_id)
            .values(
                stripe_price_id=stripe_price_id,
                stripe_current_period_end=stripe_current_period_end,
                updated_at=utcnow(),
            )
            .returning(UserSubscription)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return SubscriptionRecord.model_validate(row) if row else None

    async def commit(self) -> None:
        await self.db.commit()
