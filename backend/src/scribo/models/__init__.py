"""SQLAlchemy ORM models."""
# Import all models here to ensure they are registered with Alembic

from scribo.models.base import Base
from scribo.models.subscription import UserSubscription
from scribo.models.usage_record import UserApiLimit

__all__ = [
    "Base",
    "UserApiLimit",
    "UserSubscription",
]
