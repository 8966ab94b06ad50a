"""User subscription model mirroring Stripe billing state."""
from sqlalchemy import Column, DateTime, String

from scribo.models.base import Base


class UserSubscription(Base):
    """
    Paid subscription of a user, at most one per user.

    Created when a checkout completes and refreshed on every successful
    renewal. Access lapses through ``stripe_current_period_end``; rows are
    never deleted.
    """

    __tablename__ = "user_subscriptions"

    user_id = Column(String, nullable=False, unique=True, index=True)
    stripe_customer_id = Column(String, nullable=True, unique=True)
    stripe_subscription_id = Column(String, nullable=True, unique=True)
    stripe_price_id = Column(String, nullable=True)
    stripe_current_period_end = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<UserSubscription(user_id={self.user_id}, stripe_subscription_id={self.stripe_subscription_id})>"
