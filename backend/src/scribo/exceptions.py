"""Error taxonomy shared by every endpoint.

Each error carries the HTTP status and a message that is safe to show to the
caller. Anything else raised inside a handler is reported as an internal error
by the catch-all handler in ``scribo.main``.
"""
from fastapi import status

from scribo.schemas.error import ErrorCode


class ScriboError(Exception):
    """Base class for errors surfaced as HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "InternalError"
    code: str = ErrorCode.INTERNAL_ERROR
    default_message: str = "Internal Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ScriboError):
    """Caller identity is missing or invalid."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    code = ErrorCode.UNAUTHORIZED
    default_message = "Unauthorized"


class ServiceUnavailable(ScriboError):
    """A provider credential is not configured."""

    # Reported as 500 like every other server-side failure of these endpoints
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "ServiceUnavailable"
    code = ErrorCode.PROVIDER_NOT_CONFIGURED
    default_message = "Service not configured."


class InvalidInput(ScriboError):
    """Request payload is missing fields or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "InvalidInput"
    code = ErrorCode.INVALID_INPUT
    default_message = "Invalid request payload."


class MissingField(InvalidInput):
    """A required field is absent from a payload or webhook event."""

    code = ErrorCode.MISSING_REQUIRED_FIELD

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class QuotaExceeded(ScriboError):
    """Free tier is used up and the caller holds no active subscription."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "QuotaExceeded"
    code = ErrorCode.FREE_TRIAL_EXPIRED
    default_message = "Free trial has expired. Please upgrade to pro."


class SignatureInvalid(ScriboError):
    """Webhook payload failed signature verification."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "SignatureInvalid"
    code = ErrorCode.INVALID_SIGNATURE
    default_message = "Webhook signature verification failed."


class InternalError(ScriboError):
    """Catch-all for provider, network and storage failures."""


class WebhookProcessingError(InternalError):
    """A verified webhook event could not be applied; the provider will redeliver it."""

    default_message = "Webhook Processing Error"


class SubscriptionNotFound(Exception):
    """No stored subscription matches a provider subscription reference."""

    def __init__(self, stripe_subscription_id: str):
        self.stripe_subscription_id = stripe_subscription_id
        super().__init__(f"No subscription record for {stripe_subscription_id}")
