"""Service for free-tier usage metering."""
import structlog

from scribo.constants import MAX_FREE_COUNTS
from scribo.repositories.base import UsageRepository
from scribo.schemas.usage_record import UsageRecord

logger = structlog.get_logger(__name__)


class UsageService:
    """Counts free-tier generations per user."""

    def __init__(self, repository: UsageRepository, max_free_counts: int = MAX_FREE_COUNTS):
        """Initialize usage service with its record store."""
        self.repository = repository
        self.max_free_counts = max_free_counts

    async def check_limit(self, user_id: str) -> bool:
        """
        Check whether a user still has free generations left.

        A user without a counter has not used any quota yet.

        Args:
            user_id: User ID

        Returns:
            True if the count is below the free-tier threshold
        """
        record = await self.repository.get(user_id)
        return record is None or record.count < self.max_free_counts

    async def increment(self, user_id: str) -> UsageRecord:
        """
        Record one free-tier generation.

        No upper bound is enforced here; callers gate with ``check_limit``.
        The new count is committed before returning.

        Args:
            user_id: User ID

        Returns:
            The updated counter
        """
        record = await self.repository.increment(user_id)
        await self.repository.commit()
        logger.info("free_usage_incremented", user_id=user_id, count=record.count)
        return record

    async def get_count(self, user_id: str) -> int:
        """Return the number of free generations consumed (0 when untracked)."""
        record = await self.repository.get(user_id)
        return record.count if record else 0
