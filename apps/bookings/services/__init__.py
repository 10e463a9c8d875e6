"""Services for bookings, availability and payments."""

from .exceptions import (
    BookingServiceError,
    BookingValidationError,
    InvalidBookingStatusError,
    RelatedObjectNotFoundError,
    InsufficientAvailabilityError,
    PaymentsExceedTotalError,
    PaymentExceedsBalanceError,
)
from .availability import (
    reserved_by_day,
    peak_reserved,
    upcoming_peak_reserved,
    check_item_availability,
)
from .payment_tracking import get_balance, record_payment, get_payments
from .booking_management import (
    get_bookings,
    create_booking,
    update_booking,
    update_booking_status,
    delete_booking,
    delete_all_bookings,
)
from .calendar_feed import (
    get_calendar_events,
    get_day_summary,
    build_receipt,
    receipt_number,
    check_public_availability,
)

__all__ = [
    # Exceptions
    'BookingServiceError',
    'BookingValidationError',
    'InvalidBookingStatusError',
    'RelatedObjectNotFoundError',
    'InsufficientAvailabilityError',
    'PaymentsExceedTotalError',
    'PaymentExceedsBalanceError',
    # Availability
    'reserved_by_day',
    'peak_reserved',
    'upcoming_peak_reserved',
    'check_item_availability',
    # Payments
    'get_balance',
    'record_payment',
    'get_payments',
    # Bookings
    'get_bookings',
    'create_booking',
    'update_booking',
    'update_booking_status',
    'delete_booking',
    'delete_all_bookings',
    # Calendar and receipts
    'get_calendar_events',
    'get_day_summary',
    'build_receipt',
    'receipt_number',
    'check_public_availability',
]
