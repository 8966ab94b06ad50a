"""Authenticated caller identity."""
from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """Caller identity extracted from a verified session token."""

    user_id: str = Field(..., min_length=1, description="Identity-provider user ID")
    email: str | None = Field(default=None, description="Primary e-mail address, when the token carries one")
