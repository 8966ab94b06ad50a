"""Applies verified Stripe subscription lifecycle events to stored records."""
from typing import Any

import structlog

from scribo.adapters.stripe_adapter import StripeAdapter, lookup, reference_id
from scribo.constants import CHECKOUT_USER_ID_METADATA_KEY
from scribo.exceptions import MissingField, SubscriptionNotFound
from scribo.repositories.base import SubscriptionRepository
from scribo.schemas.subscription import SubscriptionRecord, SubscriptionRecordCreate

logger = structlog.get_logger(__name__)

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"


def invoice_subscription_id(invoice: Any) -> str | None:
    """Subscription reference of an invoice across Stripe API versions."""
    subscription = lookup(invoice, "subscription")
    if subscription is None:
        subscription = lookup(invoice, "parent", "subscription_details", "subscription")
    return reference_id(subscription)


class StripeWebhookService:
    """
    Subscription state machine driven by Stripe events.

    ``checkout.session.completed`` creates the record of the user named in the
    session metadata; ``invoice.payment_succeeded`` refreshes price and period
    end of an existing record. Both are safe to replay: the first upserts by
    user and the second overwrites with the values Stripe currently reports.
    """

    def __init__(self, repository: SubscriptionRepository, stripe_adapter: StripeAdapter):
        """Initialize webhook service with record store and Stripe adapter."""
        self.repository = repository
        self.stripe_adapter = stripe_adapter

    async def handle_event(self, event_type: str, event_object: Any) -> bool:
        """
        Dispatch one verified event.

        Args:
            event_type: Stripe event type
            event_object: The event's ``data.object``

        Returns:
            True if the event changed stored state, False if it was ignored
        """
        if event_type == CHECKOUT_SESSION_COMPLETED:
            await self.handle_checkout_completed(event_object)
            return True
        if event_type == INVOICE_PAYMENT_SUCCEEDED:
            await self.handle_invoice_payment_succeeded(event_object)
            return True

        logger.info("stripe_webhook_unhandled_event", event_type=event_type)
        return False

    async def handle_checkout_completed(self, session: Any) -> SubscriptionRecord:
        """
        Create (or replace) the subscription record of the paying user.

        Raises:
            MissingField: If the session carries no user ID or subscription
        """
        user_id = lookup(session, "metadata", CHECKOUT_USER_ID_METADATA_KEY)
        if not user_id:
            raise MissingField("metadata.userId", "User ID is required")

        subscription_id = reference_id(lookup(session, "subscription"))
        if not subscription_id:
            raise MissingField("subscription", "Subscription ID is required")

        details = await self.stripe_adapter.retrieve_subscription(subscription_id)

        record = await self.repository.upsert(
            SubscriptionRecordCreate(
                user_id=user_id,
                stripe_customer_id=details.customer_id,
                stripe_subscription_id=details.id,
                stripe_price_id=details.price_id,
                stripe_current_period_end=details.current_period_end,
            )
        )
        await self.repository.commit()

        logger.info(
            "stripe_webhook_subscription_created",
            user_id=user_id,
            stripe_subscription_id=details.id,
            current_period_end=details.current_period_end.isoformat(),
        )
        return record

    async def handle_invoice_payment_succeeded(self, invoice: Any) -> SubscriptionRecord:
        """
        Refresh price and period end after a renewal payment.

        Raises:
            MissingField: If the invoice is not tied to a subscription
            SubscriptionNotFound: If no stored record holds the subscription
        """
        subscription_id = invoice_subscription_id(invoice)
        if not subscription_id:
            raise MissingField("subscription", "Subscription ID is required")

        details = await self.stripe_adapter.retrieve_subscription(subscription_id)

        record = await self.repository.update_by_subscription_id(
            stripe_subscription_id=details.id,
            stripe_price_id=details.price_id,
            stripe_current_period_end=details.current_period_end,
        )
        if record is None:
            raise SubscriptionNotFound(details.id)
        await self.repository.commit()

        logger.info(
            "stripe_webhook_subscription_renewed",
            user_id=record.user_id,
            stripe_subscription_id=details.id,
            current_period_end=details.current_period_end.isoformat(),
        )
        return record
