"""Record store interfaces and implementations."""

from scribo.repositories.base import SubscriptionRepository, UsageRepository
from scribo.repositories.memory import InMemorySubscriptionRepository, InMemoryUsageRepository
from scribo.repositories.postgres import SqlAlchemySubscriptionRepository, SqlAlchemyUsageRepository

__all__ = [
    "UsageRepository",
    "SubscriptionRepository",
    "InMemoryUsageRepository",
    "InMemorySubscriptionRepository",
    "SqlAlchemyUsageRepository",
    "SqlAlchemySubscriptionRepository",
]
