"""
Domain exceptions for booking services.

Each exception carries the HTTP status the API answers with and, where the
client needs more than a message, the structured context via ``as_dict()``.
"""
from decimal import Decimal

from apps.core.dates import format_date_iso


def _money(value):
    return None if value is None else str(Decimal(value).quantize(Decimal('0.01')))


class BookingServiceError(Exception):
    """Base exception for booking services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class BookingValidationError(BookingServiceError):
    """Raised when booking input breaks a business rule."""
    pass


class InvalidBookingStatusError(BookingServiceError):
    """Raised for statuses the API does not accept (DRAFT)."""
    pass


class RelatedObjectNotFoundError(BookingServiceError):
    """Raised when a customer or item is missing or belongs to someone else."""

    status_code = 404


class InsufficientAvailabilityError(BookingServiceError):
    """Raised when an item does not have enough free units on some day."""

    status_code = 409

    def __init__(self, *, item_name, date, requested, available, reserved, total):
        self.item_name = item_name
        self.date = date
        self.requested = requested
        self.available = available
        self.reserved = reserved
        self.total = total
        super().__init__(
            f"Not enough {item_name} available on {format_date_iso(date)}: "
            f"requested {requested}, available {available}"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'item_name': self.item_name,
            'date': format_date_iso(self.date),
            'requested': self.requested,
            'available': self.available,
            'reserved': self.reserved,
            'total': self.total,
        }


class PaymentsExceedTotalError(BookingServiceError):
    """Raised when advance plus payments would be more than the total price."""

    def __init__(self, *, total_price, advance_payment, payments_total):
        self.total_price = total_price
        self.advance_payment = advance_payment
        self.payments_total = payments_total
        super().__init__(
            "Advance payment and payments cannot exceed the total price"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'total_price': _money(self.total_price),
            'advance_payment': _money(self.advance_payment),
            'payments_total': _money(self.payments_total),
            'total_payments': _money(self.advance_payment + self.payments_total),
        }


class PaymentExceedsBalanceError(BookingServiceError):
    """Raised when a payment is larger than the remaining balance."""

    def __init__(self, *, total_price, total_paid, remaining_balance, attempted_payment):
        self.total_price = total_price
        self.total_paid = total_paid
        self.remaining_balance = remaining_balance
        self.attempted_payment = attempted_payment
        super().__init__(
            f"Payment of {_money(attempted_payment)} exceeds the remaining balance "
            f"of {_money(remaining_balance)}"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'total_price': _money(self.total_price),
            'total_paid': _money(self.total_paid),
            'remaining_balance': _money(self.remaining_balance),
            'attempted_payment': _money(self.attempted_payment),
        }
