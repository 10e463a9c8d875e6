"""Dispatch of verified Stripe webhook events."""

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError

from apps.bookings.models import Booking, PaymentSource
from apps.bookings.services import record_payment
from .stripe_gateway import from_minor_units
from .subscriptions import sync_subscription

logger = structlog.get_logger(__name__)


def _handle_payment_succeeded(intent) -> None:
    metadata = intent.get('metadata') or {}
    booking_id = metadata.get('booking_id')
    if not booking_id:
        logger.info("payment_without_booking", payment_intent_id=intent['id'])
        return

    try:
        booking = Booking.objects.get(id=booking_id)
    except (Booking.DoesNotExist, ValidationError):
        logger.warning("payment_booking_missing", payment_intent_id=intent['id'], booking_id=booking_id)
        return

    amount = from_minor_units(intent.get('amount_received') or 0)
    if amount <= Decimal('0'):
        logger.warning("payment_without_amount", payment_intent_id=intent['id'])
        return

    # The money has already moved, so a payment above the balance is kept
    record_payment(
        booking=booking,
        amount=amount,
        notes=f"Stripe payment ({intent['id']})",
        source=PaymentSource.STRIPE,
        external_reference=intent['id'],
        allow_overpayment=True,
    )


def _handle_payment_failed(intent) -> None:
    error = intent.get('last_payment_error') or {}
    logger.warning(
        "payment_failed",
        payment_intent_id=intent['id'],
        booking_id=(intent.get('metadata') or {}).get('booking_id'),
        reason=error.get('message'),
    )


def handle_webhook_event(event) -> bool:
    """
    Apply a verified event.

    Returns:
        True when the event type is handled, False otherwise
    """
    event_type = event['type']
    obj = event['data']['object']

    if event_type == 'payment_intent.succeeded':
        _handle_payment_succeeded(obj)
    elif event_type == 'payment_intent.payment_failed':
        _handle_payment_failed(obj)
    elif event_type in ('customer.subscription.created', 'customer.subscription.updated'):
        sync_subscription(stripe_subscription=obj)
    elif event_type == 'customer.subscription.deleted':
        sync_subscription(stripe_subscription=obj, deleted=True)
    else:
        logger.info("webhook_unhandled", event_type=event_type, event_id=event.get('id'))
        return False

    logger.info("webhook_handled", event_type=event_type, event_id=event.get('id'))
    return True
