"""Domain-specific exceptions for inventory services."""


class InventoryServiceError(Exception):
    """Base exception for inventory services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class ItemNotFoundError(InventoryServiceError):
    """Raised when an item does not exist or is not visible to the user."""

    status_code = 404


class QuantityBelowReservedError(InventoryServiceError):
    """Raised when stock would drop below what upcoming bookings already hold."""

    status_code = 409

    def __init__(self, *, item_name, requested_quantity, max_reserved):
        self.item_name = item_name
        self.requested_quantity = requested_quantity
        self.max_reserved = max_reserved
        super().__init__(
            f"Cannot reduce {item_name} to {requested_quantity}: "
            f"up to {max_reserved} units are reserved by upcoming bookings"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'requested_quantity': self.requested_quantity,
            'max_reserved': self.max_reserved,
        }


class ItemInUseError(InventoryServiceError):
    """Raised when deleting an item that active bookings still reference."""

    def __init__(self, *, item_name, blocking_bookings):
        self.item_name = item_name
        self.blocking_bookings = blocking_bookings
        lines = '\n'.join(f"• {line}" for line in blocking_bookings)
        super().__init__(
            f"Cannot delete {item_name}: it is used by active bookings.\n{lines}"
        )

    def as_dict(self):
        return {
            'error': str(self),
            'blocking_bookings': self.blocking_bookings,
        }
