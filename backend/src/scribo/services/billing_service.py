"""Starts or resumes the Stripe subscription flow of a user."""
import structlog

from scribo.adapters.stripe_adapter import StripeAdapter
from scribo.config import Settings
from scribo.constants import SETTINGS_PATH
from scribo.metrics import billing_sessions_created_total
from scribo.repositories.base import SubscriptionRepository
from scribo.schemas.subscription import BillingSession

logger = structlog.get_logger(__name__)


class BillingService:
    """Creates Stripe checkout and billing portal sessions."""

    def __init__(self, repository: SubscriptionRepository, stripe_adapter: StripeAdapter, settings: Settings):
        self.repository = repository
        self.stripe_adapter = stripe_adapter
        self.settings = settings

    async def create_billing_session(self, user_id: str, email: str | None = None) -> BillingSession:
        """
        Return the Stripe page a user should be sent to.

        Users already known to Stripe get the billing portal; everyone else
        gets a new subscription checkout tagged with their user ID.

        Args:
            user_id: Caller's user ID
            email: Caller's e-mail, pre-filled on checkout when known

        Returns:
            Session URL wrapper
        """
        settings_url = self.settings.absolute_url(SETTINGS_PATH)
        subscription = await self.repository.get_by_user_id(user_id)

        if subscription and subscription.stripe_customer_id:
            url = await self.stripe_adapter.create_billing_portal_session(
                customer_id=subscription.stripe_customer_id,
                return_url=settings_url,
            )
            billing_sessions_created_total.labels(session_type="portal").inc()
            logger.info("billing_portal_session_created", user_id=user_id)
            return BillingSession(url=url)

        url = await self.stripe_adapter.create_checkout_session(
            user_id=user_id,
            success_url=settings_url,
            cancel_url=settings_url,
            customer_email=email,
        )
        billing_sessions_created_total.labels(session_type="checkout").inc()
        logger.info("checkout_session_created", user_id=user_id)
        return BillingSession(url=url)
