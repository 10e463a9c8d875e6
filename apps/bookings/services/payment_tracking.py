"""
Balance and payment tracking.

    remaining_balance = total_price - (advance_payment + sum(payments))

A booking without ``total_price`` has no balance to enforce: payments are
accepted and the remaining balance is reported as ``None``.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.bookings.models import Booking, Payment, PaymentSource
from .exceptions import BookingValidationError, PaymentExceedsBalanceError

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def get_balance(booking: Booking) -> dict:
    """Financial summary of a booking."""
    payments_total = booking.payments.aggregate(total=Sum('amount'))['total'] or ZERO
    advance_payment = booking.advance_payment or ZERO
    total_paid = advance_payment + payments_total

    if booking.total_price is None:
        remaining_balance = None
        is_fully_paid = False
    else:
        remaining_balance = booking.total_price - total_paid
        is_fully_paid = remaining_balance <= ZERO

    return {
        'total_price': booking.total_price,
        'advance_payment': advance_payment,
        'payments_total': payments_total,
        'total_paid': total_paid,
        'remaining_balance': remaining_balance,
        'is_fully_paid': is_fully_paid,
    }


@transaction.atomic
def record_payment(
    *,
    booking: Booking,
    amount: Decimal,
    payment_date=None,
    notes: str = '',
    source: str = PaymentSource.MANUAL,
    external_reference: str = '',
    allow_overpayment: bool = False,
) -> Payment:
    """
    Record a payment against a booking.

    The booking row is locked while the balance is computed so two
    concurrent payments cannot both fit into the same remaining balance,
    and a replayed processor id is looked up only once the lock is held.

    Args:
        booking: Booking being paid
        amount: Positive amount in the business currency
        payment_date: When the money was received (defaults to now)
        source: manual or stripe
        external_reference: Processor id; a repeated id returns the existing payment
        allow_overpayment: Accept amounts above the remaining balance (processor
            payments that already happened)

    Raises:
        BookingValidationError: If amount is not positive
        PaymentExceedsBalanceError: If amount exceeds the remaining balance
    """
    amount = Decimal(amount)
    if amount <= ZERO:
        raise BookingValidationError("Payment amount must be greater than zero")

    booking = Booking.objects.select_for_update().get(pk=booking.pk)

    if external_reference:
        existing = Payment.objects.filter(external_reference=external_reference).first()
        if existing is not None:
            logger.info(
                "Duplicate payment ignored",
                extra={'payment_id': str(existing.id), 'external_reference': external_reference},
            )
            return existing

    balance = get_balance(booking)
    remaining = balance['remaining_balance']

    if remaining is not None and amount > remaining:
        if not allow_overpayment:
            raise PaymentExceedsBalanceError(
                total_price=balance['total_price'],
                total_paid=balance['total_paid'],
                remaining_balance=remaining,
                attempted_payment=amount,
            )
        logger.warning(
            "Payment exceeds remaining balance",
            extra={
                'booking_id': str(booking.id),
                'amount': str(amount),
                'remaining_balance': str(remaining),
            },
        )

    payment = Payment.objects.create(
        booking=booking,
        amount=amount,
        payment_date=payment_date or timezone.now(),
        notes=notes,
        source=source,
        external_reference=external_reference,
    )
    logger.info(
        "Payment recorded",
        extra={'booking_id': str(booking.id), 'payment_id': str(payment.id), 'source': source},
    )
    return payment


def get_payments(*, booking: Booking, oldest_first: bool = False):
    payments = booking.payments.all()
    if oldest_first:
        payments = payments.order_by('payment_date', 'created_at')
    return payments
