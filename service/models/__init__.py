"""Models package for the Cart service."""
from .base import (
    db,
    CartNotFoundError,
    DataValidationError,
    InvalidItemError,
    InvalidQuantityError,
    ItemNotFoundError,
)
from .cart import Cart
from .cart_item import CartItem, validate_item_fields

__all__ = [
    "db",
    "Cart",
    "CartItem",
    "CartNotFoundError",
    "DataValidationError",
    "InvalidItemError",
    "InvalidQuantityError",
    "ItemNotFoundError",
    "validate_item_fields",
]
