"""Pytest configuration and fixtures."""
import hashlib
import hmac
import time
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient

from scribo.adapters.stripe_adapter import StripeAdapter
from scribo.api import deps
from scribo.auth.jwt import JWTAuth, get_jwt_auth
from scribo.config import Settings, get_settings
from scribo.main import app
from scribo.repositories.memory import InMemorySubscriptionRepository, InMemoryUsageRepository
from scribo.schemas.subscription import SubscriptionDetails

TEST_WEBHOOK_SECRET = "whsec_test_secret"
TEST_APP_URL = "https://scribo.test"


class FakeOpenAIAdapter:
    """Records provider calls and returns canned responses."""

    def __init__(self) -> None:
        self.chat_calls: list[list[dict[str, Any]]] = []
        self.image_calls: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self.reply = {"role": "assistant", "content": "Hello! How can I help?"}

    async def create_chat_completion(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        self.chat_calls.append(messages)
        if self.error:
            raise self.error
        return self.reply

    async def generate_images(self, prompt: str, n: int, size: str) -> list[dict[str, Any]]:
        self.image_calls.append({"prompt": prompt, "n": n, "size": size})
        if self.error:
            raise self.error
        return [{"url": f"https://images.test/{i}.png"} for i in range(n)]


class FakeReplicateAdapter:
    """Records video prompts and returns a model-style output list."""

    def __init__(self) -> None:
        self.prompts: list[str] = []
        self.error: Exception | None = None
        self.output: Any = ["https://replicate.delivery/video.mp4"]

    async def generate_video(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.output


class FakeStripeAdapter(StripeAdapter):
    """
    Stripe adapter with the network calls replaced.

    Webhook signature verification is inherited unchanged, so tests sign
    payloads with the real Stripe scheme.
    """

    def __init__(self, webhook_secret: str | None = TEST_WEBHOOK_SECRET):
        super().__init__(api_key="sk_test_fake", webhook_secret=webhook_secret)
        self.subscriptions: dict[str, SubscriptionDetails] = {}
        self.retrieved: list[str] = []
        self.checkout_sessions: list[dict[str, Any]] = []
        self.portal_sessions: list[dict[str, Any]] = []
        self.error: Exception | None = None

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionDetails:
        self.retrieved.append(subscription_id)
        if self.error:
            raise self.error
        if subscription_id not in self.subscriptions:
            raise LookupError(f"No such subscription: {subscription_id}")
        return self.subscriptions[subscription_id]

    async def create_billing_portal_session(self, customer_id: str, return_url: str) -> str:
        if self.error:
            raise self.error
        self.portal_sessions.append({"customer_id": customer_id, "return_url": return_url})
        return f"https://billing.stripe.test/p/session/{customer_id}"

    async def create_checkout_session(
        self,
        user_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
    ) -> str:
        if self.error:
            raise self.error
        self.checkout_sessions.append(
            {
                "user_id": user_id,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "customer_email": customer_email,
            }
        )
        return f"https://checkout.stripe.test/c/pay/cs_test_{len(self.checkout_sessions)}"


def sign_stripe_payload(payload: str, secret: str = TEST_WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """
    Build a Stripe-Signature header for a payload.

    Args:
        payload: Raw JSON body exactly as sent
        secret: Webhook signing secret
        timestamp: Signature time (defaults to now)

    Returns:
        str: Header value in Stripe's ``t=...,v1=...`` format
    """
    timestamp = timestamp or int(time.time())
    signed_payload = f"{timestamp}.{payload}".encode()
    signature = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture(scope="session")
def jwt_auth() -> JWTAuth:
    """Token issuer/verifier with an ephemeral key pair."""
    return JWTAuth()


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """
    Settings with every provider configured.

    Returns:
        Settings: Test configuration
    """
    return Settings(
        openai_api_key="sk-test",
        replicate_api_token="r8_test",
        stripe_secret_key="sk_test_fake",
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        app_url=TEST_APP_URL,
    )


@pytest.fixture(scope="function")
def usage_repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture(scope="function")
def subscription_repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture(scope="function")
def openai_adapter() -> FakeOpenAIAdapter:
    return FakeOpenAIAdapter()


@pytest.fixture(scope="function")
def replicate_adapter() -> FakeReplicateAdapter:
    return FakeReplicateAdapter()


@pytest.fixture(scope="function")
def stripe_adapter() -> FakeStripeAdapter:
    return FakeStripeAdapter()


@pytest.fixture(scope="function")
def client(
    test_settings: Settings,
    jwt_auth: JWTAuth,
    usage_repository: InMemoryUsageRepository,
    subscription_repository: InMemorySubscriptionRepository,
    openai_adapter: FakeOpenAIAdapter,
    replicate_adapter: FakeReplicateAdapter,
    stripe_adapter: FakeStripeAdapter,
) -> Generator[TestClient, None, None]:
    """
    Create a FastAPI test client backed by in-memory stores and fake providers.

    Server exceptions are rendered as responses so tests observe exactly what
    a caller would receive.

    Returns:
        TestClient: Synchronous test client for FastAPI
    """
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_jwt_auth] = lambda: jwt_auth
    app.dependency_overrides[deps.get_usage_repository] = lambda: usage_repository
    app.dependency_overrides[deps.get_subscription_repository] = lambda: subscription_repository
    app.dependency_overrides[deps.get_openai_adapter] = lambda: openai_adapter
    app.dependency_overrides[deps.get_replicate_adapter] = lambda: replicate_adapter
    app.dependency_overrides[deps.get_stripe_adapter] = lambda: stripe_adapter
    app.dependency_overrides[deps.get_webhook_stripe_adapter] = lambda: stripe_adapter

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def user_id() -> str:
    return "user_2abcDEFghiJKL"


@pytest.fixture(scope="function")
def auth_headers(jwt_auth: JWTAuth, user_id: str) -> dict[str, str]:
    """
    Authorization header for the default test user.

    Returns:
        dict: Bearer token header
    """
    token = jwt_auth.create_access_token(user_id, email="ada@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def sign_payload() -> Callable[..., str]:
    return sign_stripe_payload
