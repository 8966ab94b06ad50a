"""Free-tier usage status endpoint."""
import structlog
from fastapi import APIRouter, Depends

from scribo.api.deps import get_current_user, get_subscription_service, get_usage_service
from scribo.exceptions import InternalError
from scribo.schemas.usage_record import UsageStatus
from scribo.schemas.user import CurrentUser
from scribo.services.subscription_service import SubscriptionService
from scribo.services.usage_service import UsageService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Usage"])


@router.get("/usage", response_model=UsageStatus)
async def get_usage_status(
    current_user: CurrentUser = Depends(get_current_user),
    usage_service: UsageService = Depends(get_usage_service),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> UsageStatus:
    """Return the caller's free generation count and subscription state."""
    try:
        count = await usage_service.get_count(current_user.user_id)
        is_subscribed = await subscription_service.is_active(current_user.user_id)
    except Exception as exc:
        logger.exception("usage_status_failed", user_id=current_user.user_id, error_type=type(exc).__name__)
        raise InternalError() from exc

    limit = usage_service.max_free_counts
    return UsageStatus(
        count=count,
        limit=limit,
        remaining=max(limit - count, 0),
        is_subscribed=is_subscribed,
    )
