"""Fixed product constants that are not externally configurable."""
from datetime import timedelta

# Free tier
MAX_FREE_COUNTS = 5

# Paid access stays valid this long past the billing period end
SUBSCRIPTION_GRACE_PERIOD = timedelta(days=1)

# Subscription price (inline Stripe price data)
SUBSCRIPTION_CURRENCY = "USD"
SUBSCRIPTION_UNIT_AMOUNT = 2000  # $20.00 in cents
SUBSCRIPTION_INTERVAL = "month"
SUBSCRIPTION_PRODUCT_NAME = "Scribo Pro"
SUBSCRIPTION_PRODUCT_DESCRIPTION = "Unlimited AI Generations"

# Checkout metadata key used to correlate webhook events with users
CHECKOUT_USER_ID_METADATA_KEY = "userId"

SETTINGS_PATH = "/settings"

# Generation providers
CHAT_MODEL = "gpt-3.5-turbo"
VIDEO_MODEL = "anotherjesse/zeroscope-v2-xl:71996d331e8ede8ef7bd76eba9fae076d31792e4ddf4ad057779b443d6aea62f"
DEFAULT_IMAGE_RESOLUTION = "512x512"
DEFAULT_IMAGE_AMOUNT = 1
