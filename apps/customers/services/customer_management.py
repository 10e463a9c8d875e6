"""Customer management service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.core.dates import to_local_date_string
from apps.core.querysets import filter_owned
from apps.customers.models import Customer
from .exceptions import CustomerNotFoundError, CustomerHasBookingsError

logger = logging.getLogger(__name__)

NAME_FIELDS = ('first_name', 'last_name')


def to_title_case(value: str) -> str:
    """
    Capitalise each word, keeping hyphenated and apostrophe parts intact.

    ``"mary-jane o'neil"`` becomes ``"Mary-Jane O'Neil"``.
    """
    def capitalise(word):
        for sep in ("-", "'"):
            if sep in word:
                return sep.join(capitalise(part) for part in word.split(sep))
        return word[:1].upper() + word[1:].lower()

    return ' '.join(capitalise(word) for word in value.split())


def get_customers(*, user: User, search: Optional[str] = None) -> QuerySet:
    customers = filter_owned(Customer.objects.all(), user)
    if search:
        customers = customers.filter(
            Q(name__icontains=search) |
            Q(phone__icontains=search) |
            Q(email__icontains=search)
        )
    return customers


def get_customer(*, user: User, customer_id: UUID) -> Customer:
    """
    Raises:
        CustomerNotFoundError: If missing or not visible to user
    """
    try:
        return filter_owned(Customer.objects.all(), user).get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")


def _normalise_names(fields: dict) -> dict:
    for name in NAME_FIELDS:
        if name in fields and fields[name] is not None:
            fields[name] = to_title_case(fields[name])
    return fields


@transaction.atomic
def create_customer(*, owner: User, **fields) -> Customer:
    customer = Customer.objects.create(owner=owner, **_normalise_names(fields))
    logger.info("Customer created", extra={'customer_id': str(customer.id)})
    return customer


@transaction.atomic
def update_customer(*, customer: Customer, **fields) -> Customer:
    """
    Update customer fields.

    The display name is rebuilt from the stored first/last name for whichever
    of the two was not part of the update.
    """
    for name, value in _normalise_names(fields).items():
        setattr(customer, name, value)
    customer.save()
    return customer


def _booking_lines(customer: Customer) -> list:
    lines = []
    bookings = customer.bookings.prefetch_related('items__item').order_by('end_date')
    for booking in bookings:
        item_names = ', '.join(line.item.name for line in booking.items.all()) or 'No items'
        lines.append(f"{item_names} (ends {to_local_date_string(booking.end_date)})")
    return lines


@transaction.atomic
def delete_customer(*, customer: Customer) -> None:
    """
    Raises:
        CustomerHasBookingsError: If the customer has any booking, whatever its status
    """
    if customer.bookings.exists():
        raise CustomerHasBookingsError(
            customer_name=customer.name,
            bookings=_booking_lines(customer),
        )
    customer.delete()


@transaction.atomic
def delete_all_customers(*, owner: User) -> dict:
    """
    Delete every customer of ``owner`` that has no bookings.

    Returns:
        {'count': deleted, 'skipped': kept because of bookings}
    """
    customers = Customer.objects.filter(owner=owner)
    deletable = customers.filter(bookings__isnull=True)
    total = customers.count()
    count = deletable.count()
    Customer.objects.filter(id__in=deletable.values('id')).delete()

    logger.info("Bulk customer delete", extra={'owner_id': str(owner.id), 'count': count})
    return {'count': count, 'skipped': total - count}
