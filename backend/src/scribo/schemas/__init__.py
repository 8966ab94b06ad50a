"""Pydantic schemas for API request/response validation."""

from scribo.schemas.error import ErrorCode, ErrorDetail, ErrorResponse
from scribo.schemas.generation import (
    ChatMessage,
    ConversationRequest,
    ImageRequest,
    VideoRequest,
)
from scribo.schemas.subscription import (
    BillingSession,
    SubscriptionDetails,
    SubscriptionRecord,
    SubscriptionRecordCreate,
)
from scribo.schemas.usage_record import UsageRecord, UsageStatus
from scribo.schemas.user import CurrentUser

__all__ = [
    # Error schemas
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    # Generation schemas
    "ChatMessage",
    "ConversationRequest",
    "ImageRequest",
    "VideoRequest",
    # Subscription schemas
    "BillingSession",
    "SubscriptionDetails",
    "SubscriptionRecord",
    "SubscriptionRecordCreate",
    # Usage schemas
    "UsageRecord",
    "UsageStatus",
    # User schemas
    "CurrentUser",
]
