"""Booking management service - create, replace, status changes and deletion."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.bookings.models import (
    Booking,
    BookingItem,
    BookingStatus,
    Payment,
    PaymentSource,
    ACTIVE_BOOKING_STATUSES,
)
from apps.core.colors import random_booking_color
from apps.core.dates import parse_ymd, utc_today
from apps.core.querysets import filter_owned
from apps.customers.models import Customer
from apps.inventory.models import Item
from .availability import check_item_availability
from .exceptions import (
    BookingValidationError,
    InvalidBookingStatusError,
    RelatedObjectNotFoundError,
    PaymentsExceedTotalError,
)
from .payment_tracking import get_balance

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def get_bookings(
    *,
    user: User,
    status: Optional[str] = None,
    customer_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> QuerySet:
    """Bookings visible to ``user``; the date filters select overlapping bookings."""
    bookings = (
        filter_owned(Booking.objects.all(), user)
        .select_related('customer')
        .prefetch_related('items__item', 'payments')
    )
    if status:
        bookings = bookings.filter(status=status)
    if customer_id:
        bookings = bookings.filter(customer_id=customer_id)
    if date_from:
        bookings = bookings.filter(end_date__gte=date_from)
    if date_to:
        bookings = bookings.filter(start_date__lte=date_to)
    return bookings


def _validate_status(status: str) -> None:
    if status == BookingStatus.DRAFT:
        raise InvalidBookingStatusError("Draft bookings are not supported; use CONFIRMED")
    if status not in BookingStatus.values:
        raise InvalidBookingStatusError(f"Unknown status: {status}")


def _validate_dates(start_date, end_date):
    try:
        start = parse_ymd(start_date)
        end = parse_ymd(end_date)
    except ValueError as e:
        raise BookingValidationError(str(e))

    if end < start:
        raise BookingValidationError("End date cannot be before start date")

    latest = utc_today() + timedelta(days=settings.BOOKING_MAX_DAYS_AHEAD)
    if end > latest:
        raise BookingValidationError(
            f"Bookings cannot end more than {settings.BOOKING_MAX_DAYS_AHEAD} days ahead"
        )
    return start, end


def _resolve_customer(user: User, customer_id: UUID) -> Customer:
    try:
        return filter_owned(Customer.objects.all(), user).get(id=customer_id)
    except Customer.DoesNotExist:
        raise RelatedObjectNotFoundError(f"Customer {customer_id} not found")


def _resolve_items(user: User, lines: list) -> list:
    """
    Lock the requested items and pair them with quantities.

    Items are locked in id order so concurrent bookings queue instead of
    both passing the availability check.
    """
    if not lines:
        raise BookingValidationError("A booking needs at least one item")

    item_ids = [line['item_id'] for line in lines]
    if len(set(item_ids)) != len(item_ids):
        raise BookingValidationError("Each item can only appear once per booking")

    items = {
        item.id: item
        for item in filter_owned(Item.objects.all(), user)
        .select_for_update()
        .filter(id__in=item_ids)
        .order_by('id')
    }
    missing = [str(item_id) for item_id in item_ids if item_id not in items]
    if missing:
        raise RelatedObjectNotFoundError(f"Item(s) not found: {', '.join(missing)}")

    return [(items[line['item_id']], line['quantity']) for line in lines]


def _check_lines_available(resolved_lines, start, end, exclude_booking_id=None):
    for item, quantity in resolved_lines:
        check_item_availability(
            item=item,
            quantity=quantity,
            start_date=start,
            end_date=end,
            exclude_booking_id=exclude_booking_id,
        )


@transaction.atomic
def create_booking(
    *,
    owner: User,
    customer_id: UUID,
    start_date,
    end_date,
    items: list,
    status: str = BookingStatus.CONFIRMED,
    reference: str = '',
    notes: str = '',
    total_price: Optional[Decimal] = None,
    advance_payment: Decimal = ZERO,
    payment_due_date: Optional[date] = None,
    initial_payments: Optional[list] = None,
) -> Booking:
    """
    Create a booking with its item lines and any payments already received.

    This operation:
    1. Rejects DRAFT, reversed ranges and ranges too far ahead
    2. Resolves customer and items visible to ``owner``
    3. Checks every item day by day against active bookings
    4. Ensures advance + initial payments do not exceed total_price
    5. Creates booking, lines and payments atomically

    Args:
        owner: User creating the booking
        customer_id: Customer renting the items
        start_date: First day (inclusive)
        end_date: Last day (inclusive); may equal start_date
        items: [{'item_id': UUID, 'quantity': int}, ...]
        status: CONFIRMED, OUT, RETURNED or CANCELLED
        total_price: Agreed price; None leaves the balance untracked
        advance_payment: Deposit received when booking
        initial_payments: [{'amount', 'payment_date'?, 'notes'?}, ...]

    Returns:
        Created Booking instance

    Raises:
        InvalidBookingStatusError, BookingValidationError,
        RelatedObjectNotFoundError, InsufficientAvailabilityError,
        PaymentsExceedTotalError
    """
    _validate_status(status)
    start, end = _validate_dates(start_date, end_date)
    customer = _resolve_customer(owner, customer_id)
    resolved_lines = _resolve_items(owner, items)

    if status in ACTIVE_BOOKING_STATUSES:
        _check_lines_available(resolved_lines, start, end)

    initial_payments = initial_payments or []
    advance_payment = advance_payment or ZERO
    initial_total = sum((Decimal(p['amount']) for p in initial_payments), ZERO)
    if total_price is not None and advance_payment + initial_total > total_price:
        raise PaymentsExceedTotalError(
            total_price=total_price,
            advance_payment=advance_payment,
            payments_total=initial_total,
        )

    booking = Booking.objects.create(
        owner=owner,
        customer=customer,
        start_date=start,
        end_date=end,
        status=status,
        reference=reference,
        notes=notes,
        color=random_booking_color(),
        total_price=total_price,
        advance_payment=advance_payment,
        payment_due_date=payment_due_date,
    )
    BookingItem.objects.bulk_create([
        BookingItem(booking=booking, item=item, quantity=quantity)
        for item, quantity in resolved_lines
    ])
    for payment in initial_payments:
        Payment.objects.create(
            booking=booking,
            amount=payment['amount'],
            payment_date=payment.get('payment_date') or booking.created_at,
            notes=payment.get('notes', ''),
            source=PaymentSource.MANUAL,
        )

    logger.info(
        "Booking created",
        extra={'booking_id': str(booking.id), 'owner_id': str(owner.id), 'status': status},
    )
    return booking


@transaction.atomic
def update_booking(
    *,
    booking: Booking,
    customer_id: UUID,
    start_date,
    end_date,
    items: list,
    status: Optional[str] = None,
    reference: str = '',
    notes: str = '',
    total_price: Optional[Decimal] = None,
    advance_payment: Decimal = ZERO,
    payment_due_date: Optional[date] = None,
) -> Booking:
    """
    Replace a booking's customer, dates, items and pricing.

    The booking's own lines are ignored when checking availability. Recorded
    payments are kept, so the new total may not drop below what is paid.
    """
    booking = Booking.objects.select_for_update().get(pk=booking.pk)
    status = status or booking.status
    _validate_status(status)
    start, end = _validate_dates(start_date, end_date)
    customer = _resolve_customer(booking.owner, customer_id)
    resolved_lines = _resolve_items(booking.owner, items)

    if status in ACTIVE_BOOKING_STATUSES:
        _check_lines_available(resolved_lines, start, end, exclude_booking_id=booking.id)

    advance_payment = advance_payment or ZERO
    payments_total = get_balance(booking)['payments_total']
    if total_price is not None and advance_payment + payments_total > total_price:
        raise PaymentsExceedTotalError(
            total_price=total_price,
            advance_payment=advance_payment,
            payments_total=payments_total,
        )

    booking.customer = customer
    booking.start_date = start
    booking.end_date = end
    booking.status = status
    booking.reference = reference
    booking.notes = notes
    booking.total_price = total_price
    booking.advance_payment = advance_payment
    booking.payment_due_date = payment_due_date
    booking.save()

    booking.items.all().delete()
    BookingItem.objects.bulk_create([
        BookingItem(booking=booking, item=item, quantity=quantity)
        for item, quantity in resolved_lines
    ])

    logger.info("Booking updated", extra={'booking_id': str(booking.id)})
    return booking


@transaction.atomic
def update_booking_status(
    *,
    booking: Booking,
    status: Optional[str] = None,
    color: Optional[str] = None,
) -> Booking:
    """
    Change status and/or calendar color.

    Moving a RETURNED or CANCELLED booking back to CONFIRMED/OUT takes stock
    again, so availability is re-checked first.
    """
    booking = Booking.objects.select_for_update().get(pk=booking.pk)
    update_fields = []

    if status is not None and status != booking.status:
        _validate_status(status)
        if status in ACTIVE_BOOKING_STATUSES and not booking.is_active:
            lines = [
                (line.item, line.quantity)
                for line in booking.items.select_related('item')
            ]
            _check_lines_available(
                lines,
                booking.start_date,
                booking.end_date,
                exclude_booking_id=booking.id,
            )
        booking.status = status
        update_fields.append('status')

    if color is not None:
        booking.color = color
        update_fields.append('color')

    if update_fields:
        booking.save(update_fields=update_fields + ['updated_at'])
        logger.info(
            "Booking status changed",
            extra={'booking_id': str(booking.id), 'status': booking.status},
        )
    return booking


@transaction.atomic
def delete_booking(*, booking: Booking) -> None:
    logger.info("Booking deleted", extra={'booking_id': str(booking.id)})
    booking.delete()


@transaction.atomic
def delete_all_bookings(*, owner: User) -> int:
    """Delete every booking of ``owner`` with its lines and payments."""
    bookings = Booking.objects.filter(owner=owner)
    count = bookings.count()
    bookings.delete()
    logger.info("Bulk booking delete", extra={'owner_id': str(owner.id), 'count': count})
    return count
