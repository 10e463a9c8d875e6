"""Services for inventory business logic."""

from .exceptions import (
    InventoryServiceError,
    ItemNotFoundError,
    QuantityBelowReservedError,
    ItemInUseError,
)
from .item_management import (
    get_items,
    get_item,
    create_item,
    update_item,
    delete_item,
    delete_all_items,
)

__all__ = [
    # Exceptions
    'InventoryServiceError',
    'ItemNotFoundError',
    'QuantityBelowReservedError',
    'ItemInUseError',
    # Services
    'get_items',
    'get_item',
    'create_item',
    'update_item',
    'delete_item',
    'delete_all_items',
]
