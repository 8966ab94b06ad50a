"""Pydantic schemas for user subscriptions."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionRecordBase(BaseModel):
    """Stored billing state linking a user to a Stripe subscription."""

    user_id: str = Field(..., min_length=1, description="Owning user ID")
    stripe_customer_id: str | None = Field(default=None, description="Stripe customer ID")
    stripe_subscription_id: str | None = Field(default=None, description="Stripe subscription ID")
    stripe_price_id: str | None = Field(default=None, description="Stripe price ID")
    stripe_current_period_end: datetime | None = Field(default=None, description="End of the paid period")


class SubscriptionRecordCreate(SubscriptionRecordBase):
    """Schema for creating or replacing a subscription record."""


class SubscriptionRecord(SubscriptionRecordBase):
    """Schema for returning subscription record data."""

    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SubscriptionDetails(BaseModel):
    """Subset of a Stripe subscription the webhook handlers persist."""

    id: str
    customer_id: str
    price_id: str
    current_period_end: datetime


class BillingSession(BaseModel):
    """Stripe-hosted page the caller should be redirected to."""

    url: str
