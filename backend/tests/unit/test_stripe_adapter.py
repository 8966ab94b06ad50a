"""Unit tests for the Stripe adapter."""
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import stripe

from scribo.adapters.stripe_adapter import (
    StripeAdapter,
    lookup,
    reference_id,
    subscription_details_from_stripe,
)
from scribo.constants import SUBSCRIPTION_CURRENCY, SUBSCRIPTION_PRODUCT_NAME, SUBSCRIPTION_UNIT_AMOUNT
from tests.utils.factories import StripeEventFactory

PERIOD_END = 1793448000  # 2026-10-31T12:00:00Z
WEBHOOK_SECRET = "whsec_test_secret"


def _subscription_payload(**overrides) -> dict:
    payload = {
        "id": "sub_123",
        "object": "subscription",
        "customer": "cus_123",
        "current_period_end": PERIOD_END,
        "items": {
            "object": "list",
            "data": [{"id": "si_123", "object": "subscription_item", "price": {"id": "price_123", "object": "price"}}],
        },
    }
    payload.update(overrides)
    return payload


def test_lookup_nested_paths() -> None:
    """Test nested reads that stop at the first missing step."""
    data = {"a": {"b": [{"c": 1}]}}

    assert lookup(data, "a", "b", 0, "c") == 1
    assert lookup(data, "a", "x", "c") is None
    assert lookup(data, "a", "b", 5) is None
    assert lookup(None, "a") is None
    assert lookup("text", "a") is None


def test_reference_id() -> None:
    """Test resolving expanded and unexpanded references."""
    assert reference_id("cus_123") == "cus_123"
    assert reference_id({"id": "cus_456", "object": "customer"}) == "cus_456"
    assert reference_id(None) is None


def test_subscription_details_legacy_shape() -> None:
    """Test extraction when the period end sits on the subscription."""
    subscription = stripe.Subscription.construct_from(_subscription_payload(), "sk_test")

    details = subscription_details_from_stripe(subscription)

    assert details.id == "sub_123"
    assert details.customer_id == "cus_123"
    assert details.price_id == "price_123"
    assert details.current_period_end == datetime.fromtimestamp(PERIOD_END, tz=timezone.utc)


def test_subscription_details_item_period_end() -> None:
    """Test extraction when only subscription items report the period end."""
    payload = _subscription_payload(customer={"id": "cus_expanded", "object": "customer"})
    del payload["current_period_end"]
    payload["items"]["data"][0]["current_period_end"] = PERIOD_END

    details = subscription_details_from_stripe(stripe.Subscription.construct_from(payload, "sk_test"))

    assert details.customer_id == "cus_expanded"
    assert details.current_period_end.tzinfo is not None
    assert int(details.current_period_end.timestamp()) == PERIOD_END


def test_subscription_details_missing_price() -> None:
    """Test that a subscription without items cannot be stored."""
    payload = _subscription_payload(items={"object": "list", "data": []})

    with pytest.raises(ValueError):
        subscription_details_from_stripe(payload)


@pytest.mark.asyncio
async def test_construct_webhook_event_valid_signature(sign_payload) -> None:
    """Test that a correctly signed payload is parsed into an event."""
    adapter = StripeAdapter(api_key="sk_test", webhook_secret=WEBHOOK_SECRET)
    payload = json.dumps(StripeEventFactory.checkout_session_completed("user_42", "sub_123"))

    event = await adapter.construct_webhook_event(payload.encode(), sign_payload(payload, WEBHOOK_SECRET))

    assert event["type"] == "checkout.session.completed"
    assert lookup(event, "data", "object", "metadata", "userId") == "user_42"


@pytest.mark.asyncio
async def test_construct_webhook_event_wrong_secret(sign_payload) -> None:
    """Test that payloads signed with another secret are rejected."""
    adapter = StripeAdapter(api_key="sk_test", webhook_secret=WEBHOOK_SECRET)
    payload = json.dumps(StripeEventFactory.invoice_payment_succeeded("sub_123"))

    with pytest.raises(ValueError, match="Invalid signature"):
        await adapter.construct_webhook_event(payload.encode(), sign_payload(payload, "whsec_other"))


@pytest.mark.asyncio
async def test_construct_webhook_event_tampered_payload(sign_payload) -> None:
    """Test that modifying a signed payload invalidates it."""
    adapter = StripeAdapter(api_key="sk_test", webhook_secret=WEBHOOK_SECRET)
    payload = json.dumps(StripeEventFactory.checkout_session_completed("user_42", "sub_123"))
    signature = sign_payload(payload, WEBHOOK_SECRET)

    with pytest.raises(ValueError):
        await adapter.construct_webhook_event(payload.replace("user_42", "user_43").encode(), signature)


@pytest.mark.asyncio
async def test_construct_webhook_event_without_secret() -> None:
    """Test that verification is impossible without a signing secret."""
    adapter = StripeAdapter(api_key="sk_test")

    with pytest.raises(ValueError, match="not configured"):
        await adapter.construct_webhook_event(b"{}", "t=1,v1=abc")


@pytest.mark.asyncio
async def test_retrieve_subscription(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that retrieval passes the per-request API key and normalizes the result."""
    retrieve = AsyncMock(return_value=stripe.Subscription.construct_from(_subscription_payload(), "sk_test"))
    monkeypatch.setattr(stripe.Subscription, "retrieve_async", retrieve)
    adapter = StripeAdapter(api_key="sk_test_key")

    details = await adapter.retrieve_subscription("sub_123")

    retrieve.assert_awaited_once_with("sub_123", api_key="sk_test_key")
    assert details.price_id == "price_123"


@pytest.mark.asyncio
async def test_create_checkout_session(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the checkout session parameters for the monthly plan."""
    create = AsyncMock(return_value=SimpleNamespace(url="https://checkout.stripe.test/cs_1"))
    monkeypatch.setattr(stripe.checkout.Session, "create_async", create)
    adapter = StripeAdapter(api_key="sk_test_key")

    url = await adapter.create_checkout_session(
        user_id="user_42",
        success_url="https://scribo.test/settings",
        cancel_url="https://scribo.test/settings",
        customer_email="ada@example.com",
    )

    assert url == "https://checkout.stripe.test/cs_1"
    kwargs = create.await_args.kwargs
    assert kwargs["api_key"] == "sk_test_key"
    assert kwargs["mode"] == "subscription"
    assert kwargs["payment_method_types"] == ["card"]
    assert kwargs["billing_address_collection"] == "auto"
    assert kwargs["customer_email"] == "ada@example.com"
    assert kwargs["metadata"] == {"userId": "user_42"}
    assert kwargs["success_url"] == kwargs["cancel_url"] == "https://scribo.test/settings"

    line_item = kwargs["line_items"][0]
    assert line_item["quantity"] == 1
    assert line_item["price_data"]["currency"] == SUBSCRIPTION_CURRENCY
    assert line_item["price_data"]["unit_amount"] == SUBSCRIPTION_UNIT_AMOUNT
    assert line_item["price_data"]["recurring"] == {"interval": "month"}
    assert line_item["price_data"]["product_data"]["name"] == SUBSCRIPTION_PRODUCT_NAME


@pytest.mark.asyncio
async def test_create_checkout_session_without_email(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that no customer e-mail is sent when unknown."""
    create = AsyncMock(return_value=SimpleNamespace(url="https://checkout.stripe.test/cs_2"))
    monkeypatch.setattr(stripe.checkout.Session, "create_async", create)

    await StripeAdapter(api_key="sk_test_key").create_checkout_session("user_42", "https://a/s", "https://a/s")

    assert "customer_email" not in create.await_args.kwargs


@pytest.mark.asyncio
async def test_create_billing_portal_session(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test portal session creation for an existing customer."""
    create = AsyncMock(return_value=SimpleNamespace(url="https://billing.stripe.test/p/1"))
    monkeypatch.setattr(stripe.billing_portal.Session, "create_async", create)

    url = await StripeAdapter(api_key="sk_test_key").create_billing_portal_session(
        "cus_123", "https://scribo.test/settings"
    )

    assert url == "https://billing.stripe.test/p/1"
    create.assert_awaited_once_with(
        api_key="sk_test_key",
        customer="cus_123",
        return_url="https://scribo.test/settings",
    )
