"""Domain-specific exceptions for billing services."""


class BillingServiceError(Exception):
    """Base exception for billing services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class StripeNotConfiguredError(BillingServiceError):
    """Raised when Stripe keys are missing from the environment."""

    status_code = 503


class PaymentProviderError(BillingServiceError):
    """Raised when Stripe rejects or fails a request."""

    status_code = 502


class WebhookVerificationError(BillingServiceError):
    """Raised when a webhook payload or its signature cannot be verified."""
    pass


class SubscriptionNotFoundError(BillingServiceError):
    """Raised when the user has no Stripe-backed subscription."""

    status_code = 404


class BookingNotFoundError(BillingServiceError):
    """Raised when a payment names a booking the user does not own."""

    status_code = 404
