"""Pydantic schemas for free-tier usage records."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UsageRecord(BaseModel):
    """Free-tier generation counter for one user."""

    user_id: str = Field(..., min_length=1, description="Owning user ID")
    count: int = Field(default=0, ge=0, description="Generations consumed")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UsageStatus(BaseModel):
    """Free counter and subscriber state returned to the client."""

    count: int = Field(..., ge=0, description="Free-tier generations consumed")
    limit: int = Field(..., description="Free-tier generation allowance")
    remaining: int = Field(..., ge=0, description="Free-tier generations left")
    is_subscribed: bool = Field(..., description="Whether the user holds an active subscription")
