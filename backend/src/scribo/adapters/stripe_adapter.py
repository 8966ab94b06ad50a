"""Stripe payment gateway adapter."""
from datetime import datetime, timezone
from typing import Any

import stripe

from scribo.constants import (
    CHECKOUT_USER_ID_METADATA_KEY,
    SUBSCRIPTION_CURRENCY,
    SUBSCRIPTION_INTERVAL,
    SUBSCRIPTION_PRODUCT_DESCRIPTION,
    SUBSCRIPTION_PRODUCT_NAME,
    SUBSCRIPTION_UNIT_AMOUNT,
)
from scribo.schemas.subscription import SubscriptionDetails


def lookup(obj: Any, *path: Any) -> Any:
    """
    Read a nested field from a Stripe object or plain dict.

    Returns None as soon as a key or index along ``path`` is missing.
    """
    for key in path:
        if obj is None:
            return None
        try:
            obj = obj[key]
        except (LookupError, TypeError):
            return None
    return obj


def reference_id(value: Any) -> str | None:
    """Return the ID of a Stripe reference that may or may not be expanded."""
    if value is None or isinstance(value, str):
        return value
    return lookup(value, "id")


def subscription_details_from_stripe(subscription: Any) -> SubscriptionDetails:
    """
    Normalize a Stripe subscription into the fields stored per user.

    Newer Stripe API versions report the billing period on subscription items
    instead of the subscription itself; both shapes are accepted.

    Raises:
        ValueError: If the subscription lacks a customer, price or period end
    """
    item = lookup(subscription, "items", "data", 0)
    customer_id = reference_id(lookup(subscription, "customer"))
    price_id = lookup(item, "price", "id")
    period_end = lookup(subscription, "current_period_end")
    if period_end is None:
        period_end = lookup(item, "current_period_end")

    if not customer_id or not price_id or period_end is None:
        raise ValueError(f"Subscription {lookup(subscription, 'id')} is missing billing details")

    return SubscriptionDetails(
        id=lookup(subscription, "id"),
        customer_id=customer_id,
        price_id=price_id,
        current_period_end=datetime.fromtimestamp(int(period_end), tz=timezone.utc),
    )


class StripeAdapter:
    """Adapter for Stripe payment gateway integration."""

    def __init__(self, api_key: str | None, webhook_secret: str | None = None):
        """
        Initialize Stripe adapter.

        The API key is passed per request so no global Stripe state is touched.
        """
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    async def construct_webhook_event(self, payload: bytes, signature: str) -> Any:
        """
        Construct and verify webhook event.

        Args:
            payload: Raw webhook payload
            signature: Value of the Stripe-Signature header

        Returns:
            Stripe event object

        Raises:
            ValueError: If the payload is malformed or signature verification fails
        """
        if not self.webhook_secret:
            raise ValueError("Webhook signing secret is not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as e:
            raise ValueError(f"Invalid payload: {e}") from e
        except stripe.SignatureVerificationError as e:
            raise ValueError(f"Invalid signature: {e}") from e

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionDetails:
        """
        Retrieve a subscription and extract its billing details.

        Args:
            subscription_id: Stripe subscription ID

        Returns:
            Normalized subscription details
        """
        subscription = await stripe.Subscription.retrieve_async(subscription_id, api_key=self.api_key)
        return subscription_details_from_stripe(subscription)

    async def create_billing_portal_session(self, customer_id: str, return_url: str) -> str:
        """
        Create a billing portal session for an existing customer.

        Args:
            customer_id: Stripe customer ID
            return_url: Where Stripe sends the customer back to

        Returns:
            Portal session URL
        """
        session = await stripe.billing_portal.Session.create_async(
            api_key=self.api_key,
            customer=customer_id,
            return_url=return_url,
        )
        return session.url

    async def create_checkout_session(
        self,
        user_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
    ) -> str:
        """
        Create a subscription checkout session for the fixed monthly price.

        The user ID is stored in the session metadata so the
        ``checkout.session.completed`` webhook can be matched back to the user.

        Args:
            user_id: User starting the subscription
            success_url: Redirect target after payment
            cancel_url: Redirect target when the user aborts
            customer_email: Pre-filled customer e-mail (optional)

        Returns:
            Checkout session URL
        """
        params: dict[str, Any] = {
            "success_url": success_url,
            "cancel_url": cancel_url,
            "payment_method_types": ["card"],
            "mode": "subscription",
            "billing_address_collection": "auto",
            "line_items": [
                {
                    "price_data": {
                        "currency": SUBSCRIPTION_CURRENCY,
                        "product_data": {
                            "name": SUBSCRIPTION_PRODUCT_NAME,
                            "description": SUBSCRIPTION_PRODUCT_DESCRIPTION,
                        },
                        "unit_amount": SUBSCRIPTION_UNIT_AMOUNT,
                        "recurring": {"interval": SUBSCRIPTION_INTERVAL},
                    },
                    "quantity": 1,
                }
            ],
            "metadata": {CHECKOUT_USER_ID_METADATA_KEY: user_id},
        }

        if customer_email:
            params["customer_email"] = customer_email

        session = await stripe.checkout.Session.create_async(api_key=self.api_key, **params)
        return session.url
