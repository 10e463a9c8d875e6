"""
Per-day stock availability.

A booking holds its quantities on every day from ``start_date`` to
``end_date`` inclusive, and only while its status is CONFIRMED or OUT.
Availability is checked day by day: two bookings that never share a day can
both take the full stock even if their ranges are close.
"""

from datetime import date
from typing import Dict, Iterable, Optional
from uuid import UUID

from apps.bookings.models import BookingItem, ACTIVE_BOOKING_STATUSES
from apps.core.dates import iter_days, parse_ymd, utc_today
from apps.inventory.models import Item
from .exceptions import InsufficientAvailabilityError


def active_booking_lines(
    *,
    item_ids: Iterable[UUID],
    start_date: date,
    end_date: date,
    exclude_booking_id: Optional[UUID] = None,
):
    """Booking lines of active bookings overlapping ``[start_date, end_date]``."""
    lines = (
        BookingItem.objects
        .filter(
            item_id__in=list(item_ids),
            booking__status__in=ACTIVE_BOOKING_STATUSES,
            booking__start_date__lte=end_date,
            booking__end_date__gte=start_date,
        )
        .select_related('booking')
    )
    if exclude_booking_id is not None:
        lines = lines.exclude(booking_id=exclude_booking_id)
    return lines


def reserved_by_day(
    *,
    item: Item,
    start_date,
    end_date,
    exclude_booking_id: Optional[UUID] = None,
) -> Dict[date, int]:
    """Units of ``item`` held by active bookings on each day of the range."""
    start = parse_ymd(start_date)
    end = parse_ymd(end_date)
    reserved = {day: 0 for day in iter_days(start, end)}

    lines = active_booking_lines(
        item_ids=[item.id],
        start_date=start,
        end_date=end,
        exclude_booking_id=exclude_booking_id,
    )
    for line in lines:
        overlap_start = max(line.booking.start_date, start)
        overlap_end = min(line.booking.end_date, end)
        for day in iter_days(overlap_start, overlap_end):
            reserved[day] += line.quantity

    return reserved


def peak_reserved(*, item: Item, start_date, end_date, exclude_booking_id=None) -> int:
    """Highest number of units reserved on any single day of the range."""
    reserved = reserved_by_day(
        item=item,
        start_date=start_date,
        end_date=end_date,
        exclude_booking_id=exclude_booking_id,
    )
    return max(reserved.values(), default=0)


def upcoming_peak_reserved(*, item: Item, today: Optional[date] = None) -> int:
    """Peak reservation of ``item`` from today until its last active booking ends."""
    today = today or utc_today()
    last_end = (
        BookingItem.objects
        .filter(
            item=item,
            booking__status__in=ACTIVE_BOOKING_STATUSES,
            booking__end_date__gte=today,
        )
        .order_by('-booking__end_date')
        .values_list('booking__end_date', flat=True)
        .first()
    )
    if last_end is None:
        return 0
    return peak_reserved(item=item, start_date=today, end_date=last_end)


def check_item_availability(
    *,
    item: Item,
    quantity: int,
    start_date,
    end_date,
    exclude_booking_id: Optional[UUID] = None,
) -> None:
    """
    Ensure ``quantity`` units of ``item`` are free on every day of the range.

    Raises:
        InsufficientAvailabilityError: On the first day that falls short
    """
    reserved = reserved_by_day(
        item=item,
        start_date=start_date,
        end_date=end_date,
        exclude_booking_id=exclude_booking_id,
    )
    for day, units in reserved.items():
        available = item.total_quantity - units
        if available < quantity:
            raise InsufficientAvailabilityError(
                item_name=item.name,
                date=day,
                requested=quantity,
                available=max(available, 0),
                reserved=units,
                total=item.total_quantity,
            )
