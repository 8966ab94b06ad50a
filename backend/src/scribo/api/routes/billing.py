"""Stripe checkout / billing portal session endpoint."""
import structlog
from fastapi import APIRouter, Depends

from scribo.api.deps import get_billing_service, get_current_user
from scribo.exceptions import InternalError
from scribo.schemas.subscription import BillingSession
from scribo.schemas.user import CurrentUser
from scribo.services.billing_service import BillingService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Billing"])


@router.get("/stripe", response_model=BillingSession)
async def create_billing_session(
    current_user: CurrentUser = Depends(get_current_user),
    billing_service: BillingService = Depends(get_billing_service),
) -> BillingSession:
    """
    Start or manage the caller's subscription.

    Returns a Stripe billing portal URL for existing customers, otherwise a
    checkout URL for the monthly plan. The client is responsible for the
    redirect.
    """
    try:
        return await billing_service.create_billing_session(current_user.user_id, current_user.email)
    except Exception as exc:
        logger.exception("billing_session_failed", user_id=current_user.user_id, error_type=type(exc).__name__)
        raise InternalError() from exc
