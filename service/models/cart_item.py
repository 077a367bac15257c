"""
Cart item model definition.
"""
import decimal
import logging
from decimal import Decimal

from .base import (
    CRUDMixin,
    InvalidQuantityError,
    db,
    field_errors,
    new_id,
    to_iso,
    utcnow,
)

logger = logging.getLogger("flask.app")

MAX_TEXT_LENGTH = 255
CENTS = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_PRICE = Decimal("99999999.99")


def to_price(value) -> Decimal:
    """Convert a number or numeric string into a two-decimal Decimal."""
    return Decimal(str(value)).quantize(CENTS, rounding=decimal.ROUND_HALF_UP)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_item_fields(
    product_id, product_name, price, quantity, category=None, sku=None
) -> dict:
    """
    Check the fields of a new cart item

    Returns:
        dict: field name -> error message, empty when every field is valid
    """
    errors = {}

    if product_id is None:
        errors["productId"] = "ProductId required"
    elif not _is_int(product_id) or product_id <= 0:
        errors["productId"] = "Product ID must be a positive integer"

    if product_name is None or not str(product_name).strip():
        errors["productName"] = "ProductName required"
    elif len(str(product_name)) > MAX_TEXT_LENGTH:
        errors["productName"] = (
            f"Product name cannot be longer than {MAX_TEXT_LENGTH} characters"
        )

    if price is None:
        errors["price"] = "Price required"
    else:
        try:
            amount = Decimal(str(price))
        except (decimal.InvalidOperation, ValueError, TypeError):
            amount = None
        if amount is None or not amount.is_finite():
            errors["price"] = "Price must be a number"
        elif amount < 0:
            errors["price"] = "Price cannot be negative"
        elif amount > MAX_PRICE:
            errors["price"] = f"Price cannot be greater than {MAX_PRICE}"

    if quantity is None:
        errors["quantity"] = "Quantity required"
    elif not _is_int(quantity) or quantity <= 0:
        errors["quantity"] = "Quantity must be greater than 0"

    if category is not None and len(str(category)) > MAX_TEXT_LENGTH:
        errors["category"] = (
            f"Category cannot be longer than {MAX_TEXT_LENGTH} characters"
        )
    if sku is not None and len(str(sku)) > MAX_TEXT_LENGTH:
        errors["sku"] = f"SKU cannot be longer than {MAX_TEXT_LENGTH} characters"

    return errors


class CartItem(CRUDMixin, db.Model):
    """Represents a single product line stored inside a cart."""

    ##################################################
    # Table Schema
    ##################################################
    __tablename__ = "cart_items"

    id = db.Column(db.String(36), primary_key=True)
    cart_id = db.Column(
        db.String(36),
        db.ForeignKey("carts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(db.Integer, nullable=False)
    product_name = db.Column(db.String(MAX_TEXT_LENGTH), nullable=False)
    category = db.Column(db.String(MAX_TEXT_LENGTH), nullable=True)
    sku = db.Column(db.String(MAX_TEXT_LENGTH), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    # Insertion order within the cart
    position = db.Column(db.Integer, nullable=False, default=0)
    added_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Non-owning reference back to the cart; the cart controls the lifetime
    cart = db.relationship("Cart", back_populates="items")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.id is None:
            self.id = new_id()  # pylint: disable=invalid-name
        if self.added_at is None:
            self.added_at = utcnow()
        if self.price is not None:
            self.price = to_price(self.price)

    def __repr__(self):
        return (
            f"<CartItem id=[{self.id}] "
            f"cart_id=[{self.cart_id}] product_id=[{self.product_id}]>"
        )

    # ------------------------------------------------------------------
    # DERIVED VALUES
    # ------------------------------------------------------------------
    @property
    def subtotal(self) -> Decimal:
        """price * quantity, computed on every access"""
        return Decimal(self.price) * int(self.quantity)

    def set_quantity(self, quantity):
        """Change the quantity; price and identity are left untouched."""
        if not _is_int(quantity) or quantity <= 0:
            raise InvalidQuantityError(
                "Validation failed",
                details=field_errors({"quantity": "Quantity must be greater than 0"}),
            )
        logger.info("Setting quantity of CartItem %s to %s", self.id, quantity)
        self.quantity = quantity
        self.updated_at = utcnow()
        return self

    # ------------------------------------------------------------------
    # SERIALIZATION
    # ------------------------------------------------------------------
    def serialize(self):
        """Serializes a CartItem into a dictionary"""
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "category": self.category,
            "sku": self.sku,
            "price": float(self.price),
            "quantity": self.quantity,
            "subtotal": float(self.subtotal),
            "addedAt": to_iso(self.added_at),
            "updatedAt": to_iso(self.updated_at),
        }

    # ------------------------------------------------------------------
    # CLASS METHODS
    # ------------------------------------------------------------------
    @classmethod
    def find(cls, by_id):
        """Finds a CartItem by it's ID"""
        logger.info("Processing lookup for item id %s ...", by_id)
        return cls.query.session.get(cls, by_id)

    @classmethod
    def find_by_cart_id(cls, cart_id):
        """Returns all CartItems with the given cart_id"""
        logger.info("Processing cart_id query for %s ...", cart_id)
        return cls.query.filter(cls.cart_id == cart_id)
