"""
Thin wrapper around the Stripe SDK.

Every call passes the secret key explicitly so tests can override settings
without touching module globals.
"""

import json
from decimal import Decimal, ROUND_HALF_UP

import stripe
import structlog
from django.conf import settings

from .exceptions import (
    StripeNotConfiguredError,
    PaymentProviderError,
    WebhookVerificationError,
)

logger = structlog.get_logger(__name__)


def is_stripe_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY and settings.STRIPE_PUBLISHABLE_KEY)


def _require_configured():
    if not is_stripe_configured():
        raise StripeNotConfiguredError("Payments are not configured")


def to_minor_units(amount) -> int:
    """``1500.50`` -> ``150050``"""
    return int((Decimal(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(Decimal('0.01'))


def create_payment_intent(
    *,
    amount,
    currency: str,
    description: str = '',
    customer_email: str = '',
    metadata: dict = None,
) -> dict:
    """
    Create a PaymentIntent for ``amount`` in major units of ``currency``.

    Returns:
        dict with client_secret, payment_intent_id and amount (major units)

    Raises:
        StripeNotConfiguredError: If keys are missing
        PaymentProviderError: If Stripe rejects the request
    """
    _require_configured()

    params = {
        'amount': to_minor_units(amount),
        'currency': currency.lower(),
        'metadata': metadata or {},
        'automatic_payment_methods': {'enabled': True},
    }
    if description:
        params['description'] = description
    if customer_email:
        params['receipt_email'] = customer_email

    try:
        intent = stripe.PaymentIntent.create(api_key=settings.STRIPE_SECRET_KEY, **params)
    except stripe.StripeError as e:
        logger.error("stripe_payment_intent_failed", error=str(e), amount=params['amount'])
        raise PaymentProviderError("Could not start the payment") from e

    logger.info("stripe_payment_intent_created", payment_intent_id=intent.id, amount=intent.amount)
    return {
        'client_secret': intent.client_secret,
        'payment_intent_id': intent.id,
        'amount': from_minor_units(intent.amount),
    }


def construct_webhook_event(*, payload: bytes, signature: str):
    """
    Verify a webhook body against the ``Stripe-Signature`` header and return
    the decoded event as a plain dict.

    Raises:
        StripeNotConfiguredError: If the webhook secret is missing
        WebhookVerificationError: If the header is missing or does not match
    """
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise StripeNotConfiguredError("Webhook secret is not configured")
    if not signature:
        raise WebhookVerificationError("Missing Stripe-Signature header")

    try:
        body = payload.decode('utf-8') if isinstance(payload, bytes) else payload
        stripe.WebhookSignature.verify_header(body, signature, settings.STRIPE_WEBHOOK_SECRET)
        return json.loads(body)
    except stripe.SignatureVerificationError as e:
        raise WebhookVerificationError("Invalid signature") from e
    except ValueError as e:
        raise WebhookVerificationError("Invalid payload") from e


def create_billing_portal_session(*, customer_id: str, return_url: str) -> str:
    """Return the URL of a Stripe billing-portal session."""
    _require_configured()
    try:
        session = stripe.billing_portal.Session.create(
            api_key=settings.STRIPE_SECRET_KEY,
            customer=customer_id,
            return_url=return_url,
        )
    except stripe.StripeError as e:
        logger.error("stripe_portal_session_failed", error=str(e), customer_id=customer_id)
        raise PaymentProviderError("Could not open the billing portal") from e
    return session.url
