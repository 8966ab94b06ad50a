"""Structured error response schemas."""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    field: str | None = Field(default=None, description="Field that caused the error (for validation errors)")
    value: Any | None = Field(default=None, description="Invalid value (for validation errors)")


class ErrorResponse(BaseModel):
    """Standard error response structure.

    Every failure across the API is reported with:
    - an error type matching the exception taxonomy
    - a human-readable message that never carries internal detail
    - field-level details for validation errors
    - the request ID for correlating with server logs
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "QuotaExceeded",
                "message": "Free trial has expired. Please upgrade to pro.",
                "details": None,
                "request_id": "req_1234567890ab",
                "timestamp": "2026-01-15T10:30:00Z",
            }
        }
    )

    error: str = Field(..., description="Error type (e.g., 'InvalidInput', 'QuotaExceeded', 'InternalError')")
    message: str = Field(..., description="Primary error message")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Detailed error information (for validation errors)"
    )
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp"
    )


# Error codes enum for consistency
class ErrorCode:
    """Standard error codes used across the API."""

    # Validation errors (400)
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_SIGNATURE = "invalid_signature"

    # Authentication (401)
    UNAUTHORIZED = "unauthorized"

    # Quota (403)
    FREE_TRIAL_EXPIRED = "free_trial_expired"

    # Server side (500)
    PROVIDER_NOT_CONFIGURED = "provider_not_configured"
    INTERNAL_ERROR = "internal_error"
