"""Item management service - CRUD with stock guards."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.bookings.models import Booking, ACTIVE_BOOKING_STATUSES
from apps.bookings.services.availability import upcoming_peak_reserved
from apps.core.dates import to_local_date_string
from apps.core.querysets import filter_owned
from apps.inventory.models import Item
from .exceptions import ItemNotFoundError, QuantityBelowReservedError, ItemInUseError

logger = logging.getLogger(__name__)


def get_items(*, user: User, search: Optional[str] = None) -> QuerySet:
    items = filter_owned(Item.objects.all(), user)
    if search:
        items = items.filter(name__icontains=search)
    return items


def get_item(*, user: User, item_id: UUID) -> Item:
    """
    Raises:
        ItemNotFoundError: If the item doesn't exist or isn't visible to user
    """
    try:
        return filter_owned(Item.objects.all(), user).get(id=item_id)
    except Item.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")


@transaction.atomic
def create_item(*, owner: User, **fields) -> Item:
    item = Item.objects.create(owner=owner, **fields)
    logger.info("Item created", extra={'item_id': str(item.id), 'owner_id': str(owner.id)})
    return item


@transaction.atomic
def update_item(*, item: Item, **fields) -> Item:
    """
    Update item fields.

    Lowering ``total_quantity`` is only allowed down to the peak number of
    units held by active bookings from today onward.

    Raises:
        QuantityBelowReservedError: If the new quantity is below that peak
    """
    item = Item.objects.select_for_update().get(pk=item.pk)

    new_quantity = fields.get('total_quantity')
    if new_quantity is not None and new_quantity < item.total_quantity:
        max_reserved = upcoming_peak_reserved(item=item)
        if new_quantity < max_reserved:
            raise QuantityBelowReservedError(
                item_name=item.name,
                requested_quantity=new_quantity,
                max_reserved=max_reserved,
            )

    for name, value in fields.items():
        setattr(item, name, value)
    item.save()
    return item


@transaction.atomic
def delete_item(*, item: Item) -> None:
    """
    Delete an item no active booking uses.

    Lines on returned or cancelled bookings are removed with the item.

    Raises:
        ItemInUseError: Listing the blocking bookings
    """
    blocking = (
        Booking.objects
        .filter(items__item=item, status__in=ACTIVE_BOOKING_STATUSES)
        .select_related('customer')
        .order_by('end_date')
        .distinct()
    )
    if blocking.exists():
        raise ItemInUseError(
            item_name=item.name,
            blocking_bookings=[
                f"{booking.customer.name} (ends {to_local_date_string(booking.end_date)})"
                for booking in blocking
            ],
        )

    logger.info("Item deleted", extra={'item_id': str(item.id)})
    item.delete()


@transaction.atomic
def delete_all_items(*, owner: User) -> int:
    """Delete every item of ``owner``. Returns the number of items removed."""
    items = Item.objects.filter(owner=owner)
    count = items.count()
    items.delete()
    logger.info("Bulk item delete", extra={'owner_id': str(owner.id), 'count': count})
    return count
