"""
Cart model definition.
"""
import logging
from decimal import Decimal

from .base import (
    CRUDMixin,
    DataValidationError,
    InvalidItemError,
    ItemNotFoundError,
    db,
    field_errors,
    new_id,
    to_iso,
    utcnow,
)
from .cart_item import CartItem, validate_item_fields

logger = logging.getLogger("flask.app")


class Cart(CRUDMixin, db.Model):
    """Represents a shopping cart and owns its line items."""

    ##################################################
    # Table Schema
    ##################################################
    __tablename__ = "carts"

    id = db.Column(db.String(36), primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Relationship: One Cart owns many CartItems
    items = db.relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
        lazy=True,
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.id is None:
            self.id = new_id()  # pylint: disable=invalid-name
        if self.created_at is None:
            self.created_at = utcnow()

    def __repr__(self):
        return f"<Cart id=[{self.id}] items={len(self.items)}>"

    # ------------------------------------------------------------------
    # CRUD OPERATIONS (logging + shared mixin behaviour)
    # ------------------------------------------------------------------
    def create(self):
        logger.info("Creating Cart %s", self.id)
        super().create()

    def update(self):
        logger.info("Saving Cart with id: %s", self.id)
        super().update()

    def delete(self):
        logger.info("Deleting Cart with id: %s", self.id)
        super().delete()

    # ------------------------------------------------------------------
    # ITEM OPERATIONS
    # ------------------------------------------------------------------
    def touch(self):
        """Record that the cart or one of its items changed."""
        self.updated_at = utcnow()

    def add_item(
        self, product_id, product_name, price, quantity, category=None, sku=None
    ) -> CartItem:
        """Validate the product data and append a new item. Does not commit."""
        errors = validate_item_fields(
            product_id, product_name, price, quantity, category, sku
        )
        if errors:
            raise InvalidItemError("Validation failed", details=field_errors(errors))

        item = CartItem(
            cart_id=self.id,
            product_id=product_id,
            product_name=product_name,
            price=price,
            quantity=quantity,
            category=category,
            sku=sku,
        )
        return self.append_item(item)

    def append_item(self, item: CartItem) -> CartItem:
        """Append an item unless it is already in this cart. Does not commit."""
        if item.cart_id is not None and item.cart_id != self.id:
            raise DataValidationError(
                f"Item {item.id} belongs to cart {item.cart_id}, not {self.id}"
            )
        if item in self.items:
            return item
        item.cart_id = self.id
        positions = [other.position or 0 for other in self.items]
        item.position = max(positions, default=-1) + 1
        self.items.append(item)
        self.touch()
        return item

    def find_item(self, item_id):
        """Return the item with this exact id, or None."""
        return next((item for item in self.items if item.id == str(item_id)), None)

    def remove_item(self, item_id):
        """Remove an item by id. Does not commit."""
        item = self.find_item(item_id)
        if item is None:
            raise ItemNotFoundError()
        self.items.remove(item)
        self.touch()
        return item

    def set_item_quantity(self, item_id, quantity) -> CartItem:
        """Change one item's quantity. Does not commit."""
        item = self.find_item(item_id)
        if item is None:
            raise ItemNotFoundError()
        item.set_quantity(quantity)
        self.touch()
        return item

    @property
    def total(self) -> Decimal:
        """Sum of item subtotals, recomputed on every read"""
        return sum((item.subtotal for item in self.items), Decimal("0"))

    # ------------------------------------------------------------------
    # VIEWS
    # ------------------------------------------------------------------
    def to_summary(self):
        """Cart fields shown in list responses"""
        return {
            "id": self.id,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
            "total": float(self.total),
        }

    def to_detail(self):
        """Cart fields plus every item"""
        data = self.to_summary()
        data["items"] = [item.serialize() for item in self.items]
        return data

    ##################################################
    # CLASS METHODS
    ##################################################
    @classmethod
    def all(cls):
        """Returns all of the Carts in the database"""
        logger.info("Processing all Carts")
        return cls.query.order_by(cls.created_at, cls.id).all()

    @classmethod
    def all_paginated(cls, page: int, limit: int):
        """Returns one page of Carts, oldest first"""
        logger.info("Processing Carts page %s (limit %s)", page, limit)
        return (
            cls.query.order_by(cls.created_at, cls.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

    @classmethod
    def find(cls, by_id):
        """Finds a Cart by it's ID"""
        logger.info("Processing lookup for id %s ...", by_id)
        return cls.query.session.get(cls, str(by_id))
