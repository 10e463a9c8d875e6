"""Services for Stripe payments and plan subscriptions."""

from .exceptions import (
    BillingServiceError,
    StripeNotConfiguredError,
    PaymentProviderError,
    WebhookVerificationError,
    SubscriptionNotFoundError,
    BookingNotFoundError,
)
from .stripe_gateway import (
    is_stripe_configured,
    to_minor_units,
    create_payment_intent,
    construct_webhook_event,
    create_billing_portal_session,
)
from .subscriptions import get_subscription, get_stripe_customer_id, sync_subscription
from .webhooks import handle_webhook_event

__all__ = [
    # Exceptions
    'BillingServiceError',
    'StripeNotConfiguredError',
    'PaymentProviderError',
    'WebhookVerificationError',
    'SubscriptionNotFoundError',
    'BookingNotFoundError',
    # Stripe
    'is_stripe_configured',
    'to_minor_units',
    'create_payment_intent',
    'construct_webhook_event',
    'create_billing_portal_session',
    # Subscriptions
    'get_subscription',
    'get_stripe_customer_id',
    'sync_subscription',
    # Webhooks
    'handle_webhook_event',
]
