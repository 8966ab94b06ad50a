"""Stripe webhook handler for subscription lifecycle events."""
import structlog
from fastapi import APIRouter, Depends, Request, Response

from scribo.adapters.stripe_adapter import StripeAdapter, lookup
from scribo.api.deps import get_subscription_repository, get_webhook_stripe_adapter
from scribo.exceptions import InvalidInput, SignatureInvalid, WebhookProcessingError
from scribo.metrics import webhook_events_total
from scribo.repositories.base import SubscriptionRepository
from scribo.services.webhook_service import StripeWebhookService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Webhooks"])


@router.post("/webhook")
async def handle_stripe_webhook(
    request: Request,
    stripe_adapter: StripeAdapter = Depends(get_webhook_stripe_adapter),
    repository: SubscriptionRepository = Depends(get_subscription_repository),
) -> Response:
    """
    Handle incoming Stripe webhook events.

    Verifies the webhook signature before anything else; unverified events are
    rejected with 400 and never applied. Verified events:
    - checkout.session.completed: create the user's subscription record
    - invoice.payment_succeeded: refresh price and period end of the record
    - anything else: acknowledged without changes

    Processing failures return 500 so Stripe redelivers the event.

    Returns:
        Empty 200 response
    """
    body = await request.body()
    signature = request.headers.get("stripe-signature")

    if not signature:
        logger.error("stripe_webhook_missing_signature")
        webhook_events_total.labels(event_type="unknown", outcome="rejected").inc()
        raise SignatureInvalid("Missing Stripe signature")

    try:
        event = await stripe_adapter.construct_webhook_event(body, signature)
    except ValueError as e:
        logger.error("stripe_webhook_verification_failed", error=str(e))
        webhook_events_total.labels(event_type="unknown", outcome="rejected").inc()
        raise SignatureInvalid() from e

    event_type = event["type"]
    event_object = event["data"]["object"]

    logger.info(
        "stripe_webhook_received",
        event_type=event_type,
        event_id=lookup(event, "id"),
    )

    service = StripeWebhookService(repository, stripe_adapter)

    try:
        applied = await service.handle_event(event_type, event_object)
    except InvalidInput as e:
        logger.warning("stripe_webhook_invalid_event", event_type=event_type, error=e.message)
        webhook_events_total.labels(event_type=event_type, outcome="rejected").inc()
        raise
    except Exception as e:
        logger.exception(
            "stripe_webhook_processing_failed",
            event_type=event_type,
            error_type=type(e).__name__,
        )
        webhook_events_total.labels(event_type=event_type, outcome="failed").inc()
        raise WebhookProcessingError() from e

    webhook_events_total.labels(event_type=event_type, outcome="applied" if applied else "ignored").inc()
    return Response(status_code=200)
