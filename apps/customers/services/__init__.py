"""Services for customer business logic."""

from .exceptions import (
    CustomerServiceError,
    CustomerNotFoundError,
    CustomerHasBookingsError,
)
from .customer_management import (
    to_title_case,
    get_customers,
    get_customer,
    create_customer,
    update_customer,
    delete_customer,
    delete_all_customers,
)

__all__ = [
    # Exceptions
    'CustomerServiceError',
    'CustomerNotFoundError',
    'CustomerHasBookingsError',
    # Services
    'to_title_case',
    'get_customers',
    'get_customer',
    'create_customer',
    'update_customer',
    'delete_customer',
    'delete_all_customers',
]
