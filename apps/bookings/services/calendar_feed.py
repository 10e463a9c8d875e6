"""
Read models built from bookings: calendar feed, day sheet, receipt and the
public availability check.
"""

from typing import Iterable, List
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import PublicPage, User
from apps.accounts.services import get_business_settings
from apps.bookings.models import Booking, BookingStatus, ACTIVE_BOOKING_STATUSES
from apps.core.colors import DEFAULT_EVENT_COLOR, OUT_EVENT_COLOR
from apps.core.dates import add_one_day, format_date_iso, parse_ymd
from apps.core.querysets import filter_owned
from apps.inventory.models import Item
from .availability import active_booking_lines, peak_reserved
from .exceptions import BookingValidationError
from .payment_tracking import get_balance, get_payments


def _active_bookings_between(user: User, start, end):
    return (
        filter_owned(Booking.objects.all(), user)
        .filter(
            status__in=ACTIVE_BOOKING_STATUSES,
            start_date__lte=end,
            end_date__gte=start,
        )
        .select_related('customer')
        .prefetch_related('items__item')
        .order_by('start_date', 'created_at')
    )


def _item_lines(booking: Booking) -> List[dict]:
    return [
        {
            'item_id': str(line.item_id),
            'name': line.item.name,
            'unit': line.item.unit,
            'quantity': line.quantity,
        }
        for line in booking.items.all()
    ]


def booking_event_title(booking: Booking) -> str:
    """``"Ada - Chair ×40, Table ×5"``"""
    items = ', '.join(f"{line.item.name} ×{line.quantity}" for line in booking.items.all())
    return f"{booking.customer.first_name} - {items}" if items else booking.customer.first_name


def get_calendar_events(*, user: User, start, end) -> List[dict]:
    """
    Active bookings overlapping ``[start, end]`` as all-day calendar events.

    Event ``end`` is exclusive, one day after the booking's last day.
    """
    start = parse_ymd(start)
    end = parse_ymd(end)
    if end < start:
        raise BookingValidationError("end must not be before start")

    events = []
    for booking in _active_bookings_between(user, start, end):
        fallback = OUT_EVENT_COLOR if booking.status == BookingStatus.OUT else DEFAULT_EVENT_COLOR
        color = booking.color or fallback
        events.append({
            'id': str(booking.id),
            'title': booking_event_title(booking),
            'start': format_date_iso(booking.start_date),
            'end': format_date_iso(add_one_day(booking.end_date)),
            'allDay': True,
            'backgroundColor': color,
            'borderColor': color,
            'extendedProps': {
                'customerId': str(booking.customer_id),
                'customerName': booking.customer.name,
                'status': booking.status,
                'color': booking.color,
                'items': _item_lines(booking),
            },
        })
    return events


def get_day_summary(*, user: User, day) -> dict:
    """
    Bookings holding stock on ``day`` and what is left of every item.
    """
    day = parse_ymd(day)
    bookings = list(_active_bookings_between(user, day, day))

    items = list(filter_owned(Item.objects.all(), user))
    reserved = {item.id: 0 for item in items}
    lines = active_booking_lines(item_ids=reserved.keys(), start_date=day, end_date=day)
    for line in lines:
        reserved[line.item_id] += line.quantity

    return {
        'date': format_date_iso(day),
        'bookings': [
            {
                'id': str(booking.id),
                'customer_id': str(booking.customer_id),
                'customer_name': booking.customer.name,
                'start_date': format_date_iso(booking.start_date),
                'end_date': format_date_iso(booking.end_date),
                'status': booking.status,
                'color': booking.color,
                'items': _item_lines(booking),
            }
            for booking in bookings
        ],
        'items': [
            {
                'item_id': str(item.id),
                'name': item.name,
                'unit': item.unit,
                'total': item.total_quantity,
                'reserved': reserved[item.id],
                'remaining': item.total_quantity - reserved[item.id],
            }
            for item in items
        ],
    }


def receipt_number(booking: Booking) -> str:
    return f"RCP-{booking.reference or str(booking.id)[:8].upper()}"


def build_receipt(*, booking: Booking) -> dict:
    """Printable receipt; amounts follow the same balance formula as everywhere else."""
    business = get_business_settings(user=booking.owner)
    balance = get_balance(booking)
    customer = booking.customer

    lines = []
    for line in booking.items.select_related('item'):
        unit_price = line.item.price
        lines.append({
            'item_id': str(line.item_id),
            'name': line.item.name,
            'unit': line.item.unit,
            'quantity': line.quantity,
            'unit_price': unit_price,
            'line_total': None if unit_price is None else unit_price * line.quantity,
        })

    return {
        'receipt_number': receipt_number(booking),
        'issued_at': timezone.now(),
        'business': {
            'name': business.business_name or booking.owner.get_display_name(),
            'email': business.business_email,
            'phone': business.business_phone,
            'address': business.business_address,
            'currency': business.currency,
            'currency_symbol': business.currency_symbol,
        },
        'customer': {
            'id': str(customer.id),
            'name': customer.name,
            'phone': customer.phone,
            'email': customer.email,
            'address': customer.address,
        },
        'booking': {
            'id': str(booking.id),
            'reference': booking.reference,
            'start_date': format_date_iso(booking.start_date),
            'end_date': format_date_iso(booking.end_date),
            'days': booking.duration_days,
            'status': booking.status,
            'notes': booking.notes,
        },
        'items': lines,
        'financial': {
            **balance,
            'payment_due_date': booking.payment_due_date,
        },
        'payments': [
            {
                'id': str(payment.id),
                'amount': payment.amount,
                'payment_date': payment.payment_date,
                'notes': payment.notes,
                'source': payment.source,
            }
            for payment in get_payments(booking=booking, oldest_first=True)
        ],
    }


def check_public_availability(
    *,
    page: PublicPage,
    start_date,
    end_date,
    item_ids: Iterable[UUID],
) -> List[dict]:
    """
    Availability of the page owner's items over a range.

    ``booked_quantity`` is the busiest day in the range, so
    ``available_quantity`` is what can be promised for the whole range.
    Unknown ids and items of other owners are left out.
    """
    start = parse_ymd(start_date)
    end = parse_ymd(end_date)
    if end < start:
        raise BookingValidationError("end_date must not be before start_date")

    items = Item.objects.filter(owner=page.user, id__in=list(item_ids)).order_by('name')
    results = []
    for item in items:
        booked = peak_reserved(item=item, start_date=start, end_date=end)
        available = max(item.total_quantity - booked, 0)
        results.append({
            'item_id': str(item.id),
            'name': item.name,
            'unit': item.unit,
            'price': item.price,
            'image_url': item.image_url,
            'total_quantity': item.total_quantity,
            'booked_quantity': booked,
            'available_quantity': available,
            'is_available': available > 0,
        })
    return results
