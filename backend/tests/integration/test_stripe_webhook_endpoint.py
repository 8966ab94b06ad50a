"""Integration tests for the Stripe webhook endpoint."""
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from scribo.api import deps
from scribo.main import app
from scribo.repositories.memory import InMemorySubscriptionRepository
from tests.utils.factories import (
    StripeEventFactory,
    SubscriptionDetailsFactory,
    SubscriptionRecordFactory,
)


def _post_event(client: TestClient, sign_payload, event: dict, secret: str | None = None):
    payload = StripeEventFactory.to_payload(event)
    signature = sign_payload(payload, secret) if secret else sign_payload(payload)
    return client.post(
        "/api/webhook",
        content=payload,
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


def test_checkout_completed_creates_subscription(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that a verified checkout stores the user's subscription."""
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details

    response = _post_event(
        client, sign_payload, StripeEventFactory.checkout_session_completed("user_42", details.id)
    )

    assert response.status_code == 200
    assert response.content == b""
    record = subscription_repository.records["user_42"]
    assert record.stripe_subscription_id == details.id
    assert record.stripe_customer_id == details.customer_id
    assert record.stripe_price_id == details.price_id
    assert record.stripe_current_period_end == details.current_period_end


def test_checkout_completed_replay(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that redelivery of the same event leaves exactly one record."""
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details
    event = StripeEventFactory.checkout_session_completed("user_42", details.id)

    first = _post_event(client, sign_payload, event)
    second = _post_event(client, sign_payload, event)

    assert first.status_code == 200
    assert second.status_code == 200
    assert list(subscription_repository.records) == ["user_42"]
    assert subscription_repository.records["user_42"].stripe_subscription_id == details.id


def test_checkout_completed_grants_access(
    client: TestClient, sign_payload, stripe_adapter, auth_headers: dict, user_id: str, usage_repository
) -> None:
    """Test that a subscription created by webhook lifts the free-tier limit."""
    from scribo.schemas.usage_record import UsageRecord

    usage_repository.records[user_id] = UsageRecord(user_id=user_id, count=5)
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details

    assert client.post("/api/video", json={"prompt": "rain"}, headers=auth_headers).status_code == 403
    _post_event(client, sign_payload, StripeEventFactory.checkout_session_completed(user_id, details.id))

    assert client.post("/api/video", json={"prompt": "rain"}, headers=auth_headers).status_code == 200


def test_invalid_signature_rejected(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that payloads signed with the wrong secret are never applied."""
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details

    response = _post_event(
        client,
        sign_payload,
        StripeEventFactory.checkout_session_completed("user_42", details.id),
        secret="whsec_attacker",
    )

    assert response.status_code == 400
    assert response.json()["error"] == "SignatureInvalid"
    assert stripe_adapter.retrieved == []
    assert subscription_repository.records == {}


def test_missing_signature_rejected(client: TestClient, subscription_repository) -> None:
    """Test that unsigned deliveries are rejected."""
    payload = StripeEventFactory.to_payload(StripeEventFactory.checkout_session_completed("user_42", "sub_1"))

    response = client.post("/api/webhook", content=payload, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert subscription_repository.records == {}


def test_checkout_without_user_id(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that a checkout without userId metadata is rejected as invalid."""
    response = _post_event(client, sign_payload, StripeEventFactory.checkout_session_completed(None, "sub_1"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "InvalidInput"
    assert body["message"] == "User ID is required"
    assert stripe_adapter.retrieved == []
    assert subscription_repository.records == {}


def test_payment_succeeded_renews_subscription(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that a renewal moves the period end forward."""
    stored = SubscriptionRecordFactory.create(
        {"user_id": "user_42", "stripe_current_period_end": datetime.now(timezone.utc) - timedelta(hours=2)}
    )
    subscription_repository.records["user_42"] = stored
    new_period_end = (datetime.now(timezone.utc) + timedelta(days=31)).replace(microsecond=0)
    stripe_adapter.subscriptions[stored.stripe_subscription_id] = SubscriptionDetailsFactory.create(
        {
            "id": stored.stripe_subscription_id,
            "customer_id": stored.stripe_customer_id,
            "price_id": stored.stripe_price_id,
            "current_period_end": new_period_end,
        }
    )

    response = _post_event(
        client, sign_payload, StripeEventFactory.invoice_payment_succeeded(stored.stripe_subscription_id)
    )

    assert response.status_code == 200
    assert subscription_repository.records["user_42"].stripe_current_period_end == new_period_end


def test_payment_succeeded_unknown_subscription(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that a renewal without a stored record fails so Stripe retries, creating nothing."""
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details

    response = _post_event(client, sign_payload, StripeEventFactory.invoice_payment_succeeded(details.id))

    assert response.status_code == 500
    assert response.json()["message"] == "Webhook Processing Error"
    assert subscription_repository.records == {}


def test_subscription_retrieval_failure(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that Stripe API failures during processing return 500."""
    stripe_adapter.error = ConnectionError("stripe down")

    response = _post_event(
        client, sign_payload, StripeEventFactory.checkout_session_completed("user_42", "sub_1")
    )

    assert response.status_code == 500
    assert "stripe down" not in response.text
    assert subscription_repository.records == {}


def test_other_events_acknowledged(
    client: TestClient, sign_payload, stripe_adapter, subscription_repository
) -> None:
    """Test that unrelated event types are acknowledged without changes."""
    event = StripeEventFactory.create("customer.subscription.updated", {"id": "sub_1", "object": "subscription"})

    response = _post_event(client, sign_payload, event)

    assert response.status_code == 200
    assert stripe_adapter.retrieved == []
    assert subscription_repository.records == {}


def test_webhook_does_not_need_session(client: TestClient, sign_payload) -> None:
    """Test that Stripe deliveries are accepted without a user session."""
    event = StripeEventFactory.create("charge.succeeded", {"id": "ch_1", "object": "charge"})

    assert _post_event(client, sign_payload, event).status_code == 200


class UnwritableSubscriptionRepository(InMemorySubscriptionRepository):
    """Accepts writes but fails to persist them."""

    async def commit(self) -> None:
        raise ConnectionError("connection lost during commit")


def test_commit_failure_requests_redelivery(client: TestClient, sign_payload, stripe_adapter) -> None:
    """Test that an event whose write cannot be stored is not acknowledged."""
    details = SubscriptionDetailsFactory.create()
    stripe_adapter.subscriptions[details.id] = details
    app.dependency_overrides[deps.get_subscription_repository] = UnwritableSubscriptionRepository

    response = _post_event(
        client, sign_payload, StripeEventFactory.checkout_session_completed("user_42", details.id)
    )

    assert response.status_code == 500
    assert response.json()["message"] == "Webhook Processing Error"
    assert "connection lost" not in response.text
