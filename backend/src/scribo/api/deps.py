"""FastAPI dependencies for identity, storage, providers and services."""
from typing import Optional

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from scribo.adapters.openai_adapter import OpenAIAdapter
from scribo.adapters.replicate_adapter import ReplicateAdapter
from scribo.adapters.stripe_adapter import StripeAdapter
from scribo.auth.jwt import JWTAuth, get_jwt_auth
from scribo.config import Settings, get_settings
from scribo.database import get_db
from scribo.exceptions import ServiceUnavailable, Unauthorized
from scribo.repositories.base import SubscriptionRepository, UsageRepository
from scribo.repositories.postgres import SqlAlchemySubscriptionRepository, SqlAlchemyUsageRepository
from scribo.schemas.user import CurrentUser
from scribo.services.access_gate import AccessGate
from scribo.services.billing_service import BillingService
from scribo.services.generation_service import GenerationService
from scribo.services.subscription_service import SubscriptionService
from scribo.services.usage_service import UsageService

logger = structlog.get_logger(__name__)

# HTTP Bearer token security scheme; missing credentials are reported as Unauthorized
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: JWTAuth = Depends(get_jwt_auth),
) -> CurrentUser:
    """
    Get current authenticated user from the identity provider's session token.

    Args:
        credentials: HTTP Bearer token from request header
        auth: Token verifier

    Returns:
        CurrentUser: User ID (``sub`` claim) and optional e-mail

    Raises:
        Unauthorized: If token is invalid, expired, or missing
    """
    if not credentials:
        raise Unauthorized()

    try:
        payload = auth.verify_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.warning("token_expired")
        raise Unauthorized()
    except jwt.InvalidTokenError as e:
        logger.warning("invalid_token", error=str(e))
        raise Unauthorized()

    if not payload.get("sub"):
        logger.warning("token_missing_subject")
        raise Unauthorized()

    return CurrentUser(user_id=str(payload["sub"]), email=payload.get("email"))


# Repositories


def get_usage_repository(db: AsyncSession = Depends(get_db)) -> UsageRepository:
    return SqlAlchemyUsageRepository(db)


def get_subscription_repository(db: AsyncSession = Depends(get_db)) -> SubscriptionRepository:
    return SqlAlchemySubscriptionRepository(db)


# Providers


def get_openai_adapter(settings: Settings = Depends(get_settings)) -> OpenAIAdapter:
    """OpenAI adapter; fails when no API key is configured."""
    if not settings.openai_api_key:
        raise ServiceUnavailable("OpenAI API Key not configured.")
    return OpenAIAdapter(api_key=settings.openai_api_key, base_url=settings.openai_api_base)


def get_replicate_adapter(settings: Settings = Depends(get_settings)) -> ReplicateAdapter:
    """Replicate adapter; fails when no API token is configured."""
    if not settings.replicate_api_token:
        raise ServiceUnavailable("Replicate API Token not configured.")
    return ReplicateAdapter(api_token=settings.replicate_api_token)


def get_stripe_adapter(settings: Settings = Depends(get_settings)) -> StripeAdapter:
    """Stripe adapter for API calls; fails when no secret key is configured."""
    if not settings.stripe_secret_key:
        raise ServiceUnavailable("Stripe API Key not configured.")
    return StripeAdapter(api_key=settings.stripe_secret_key, webhook_secret=settings.stripe_webhook_secret)


def get_webhook_stripe_adapter(settings: Settings = Depends(get_settings)) -> StripeAdapter:
    """Stripe adapter for webhook delivery; also needs the signing secret."""
    if not settings.stripe_secret_key or not settings.stripe_webhook_secret:
        raise ServiceUnavailable("Stripe webhook not configured.")
    return StripeAdapter(api_key=settings.stripe_secret_key, webhook_secret=settings.stripe_webhook_secret)


# Services


def get_usage_service(repository: UsageRepository = Depends(get_usage_repository)) -> UsageService:
    return UsageService(repository)


def get_subscription_service(
    repository: SubscriptionRepository = Depends(get_subscription_repository),
) -> SubscriptionService:
    return SubscriptionService(repository)


def get_access_gate(
    usage_service: UsageService = Depends(get_usage_service),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> AccessGate:
    return AccessGate(usage_service, subscription_service)


def get_generation_service(access_gate: AccessGate = Depends(get_access_gate)) -> GenerationService:
    return GenerationService(access_gate)


def get_billing_service(
    repository: SubscriptionRepository = Depends(get_subscription_repository),
    stripe_adapter: StripeAdapter = Depends(get_stripe_adapter),
    settings: Settings = Depends(get_settings),
) -> BillingService:
    return BillingService(repository, stripe_adapter, settings)
