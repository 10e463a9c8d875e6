"""Domain-specific exceptions for customer services."""


class CustomerServiceError(Exception):
    """Base exception for customer services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class CustomerNotFoundError(CustomerServiceError):
    """Raised when a customer does not exist or is not visible to the user."""

    status_code = 404


class CustomerHasBookingsError(CustomerServiceError):
    """Raised when deleting a customer that still has bookings."""

    def __init__(self, *, customer_name, bookings):
        self.customer_name = customer_name
        self.bookings = bookings
        lines = '\n'.join(f"• {line}" for line in bookings)
        super().__init__(
            f"Cannot delete {customer_name}: they have {len(bookings)} booking(s).\n{lines}"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'bookings': self.bookings,
        }
