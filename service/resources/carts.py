"""Flask-RESTX resources for cart operations."""

# pylint: disable=too-few-public-methods

import uuid

from flask import current_app as app, request
from flask_restx import Namespace, Resource, fields

from service.api import api
from service.cart_cache import cart_cache
from service.common import status
from service.models import Cart, CartNotFoundError, DataValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 9999

ns = Namespace("carts", path="/carts", description="Cart operations")

# ---------------------------------------------------------------------------
# Swagger models
# ---------------------------------------------------------------------------
message_model = ns.model(
    "Message",
    {
        "status": fields.Integer(example=404),
        "error": fields.String(example="Not Found"),
        "code": fields.String(example="CART_NOT_FOUND"),
        "message": fields.String(example="Cart not found"),
    },
)

cart_item_model = ns.model(
    "CartItem",
    {
        "id": fields.String(readonly=True, description="Item identifier"),
        "productId": fields.Integer(required=True, example=123),
        "productName": fields.String(required=True, example="Laptop"),
        "category": fields.String(example="Electronics"),
        "sku": fields.String(example="LAP-001"),
        "price": fields.Float(required=True, example=999.99),
        "quantity": fields.Integer(required=True, example=2),
        "subtotal": fields.Float(readonly=True, example=1999.98),
        "addedAt": fields.String(readonly=True, example="2024-01-01T12:00:00+00:00"),
        "updatedAt": fields.String(readonly=True),
    },
)

cart_summary_model = ns.model(
    "CartSummary",
    {
        "id": fields.String(readonly=True, description="Cart identifier"),
        "createdAt": fields.String(readonly=True, example="2024-01-01T12:00:00+00:00"),
        "updatedAt": fields.String(readonly=True),
        "total": fields.Float(readonly=True, example=1999.98),
    },
)

cart_model = ns.inherit(
    "Cart",
    cart_summary_model,
    {"items": fields.List(fields.Nested(cart_item_model))},
)


######################################################################
# Helper Functions
######################################################################
def _require_uuid(cart_id) -> None:
    """Cart ids are UUIDs; anything else names no cart."""
    try:
        uuid.UUID(str(cart_id))
    except ValueError as error:
        raise CartNotFoundError() from error


def get_cart_or_404(cart_id) -> Cart:
    """Load a cart or raise CartNotFoundError."""
    _require_uuid(cart_id)
    cart = Cart.find(cart_id)
    if not cart:
        raise CartNotFoundError()
    return cart


def _parse_positive_int(args, field: str, default: int, maximum: int) -> int:
    """Parse an optional positive integer query parameter."""
    if field not in args:
        return default
    try:
        value = int(args.get(field))
    except (TypeError, ValueError) as error:
        raise DataValidationError(f"{field} must be an integer") from error
    if value < 1 or value > maximum:
        raise DataValidationError(f"{field} must be between 1 and {maximum}")
    return value


def _summary(detail: dict) -> dict:
    """Drop the items from a cached cart detail."""
    return {key: value for key, value in detail.items() if key != "items"}


######################################################################
# Resource Classes
######################################################################
@ns.route("")
class CartCollection(Resource):
    """Handles all operations for a collection of Carts"""

    @ns.doc("list_carts")
    @ns.param("expand", "Use 'items' to include the items of each cart", enum=["items"])
    @ns.param("page", "Page number, starting at 1", type="integer")
    @ns.param("limit", "Carts per page", type="integer")
    @ns.response(200, "List of carts", [cart_summary_model])
    @ns.response(400, "Bad Request", message_model)
    def get(self):
        """List all carts"""
        page = _parse_positive_int(request.args, "page", DEFAULT_PAGE, DEFAULT_LIMIT)
        limit = _parse_positive_int(request.args, "limit", DEFAULT_LIMIT, DEFAULT_LIMIT)
        expand = request.args.get("expand")
        app.logger.info("Request to list carts page %s (limit %s)", page, limit)

        # Pages are cached with items so the cache key needs no expand flag
        carts = cart_cache.get_cart_list(
            page,
            limit,
            lambda: [cart.to_detail() for cart in Cart.all_paginated(page, limit)],
        )
        if expand == "items":
            return carts, status.HTTP_200_OK
        return [_summary(cart) for cart in carts], status.HTTP_200_OK

    @ns.doc("create_cart")
    @ns.response(201, "Cart created", cart_model)
    def post(self):
        """Create a new, empty cart"""
        cart = Cart()
        cart.create()
        cart_cache.invalidate_all_lists()
        app.logger.info("Cart with id [%s] created", cart.id)

        location_url = api.url_for(CartResource, cart_id=cart.id, _external=True)
        return cart.to_detail(), status.HTTP_201_CREATED, {"Location": location_url}


@ns.route("/<string:cart_id>")
@ns.param("cart_id", "The Cart identifier")
class CartResource(Resource):
    """Handles all operations for a single Cart"""

    @ns.doc("get_cart")
    @ns.response(200, "Cart details", cart_model)
    @ns.response(404, "Cart not found", message_model)
    def get(self, cart_id):
        """Read a cart with its items and total"""
        app.logger.info("Request to read cart %s", cart_id)
        _require_uuid(cart_id)
        detail = cart_cache.get_cart(cart_id, lambda: get_cart_or_404(cart_id).to_detail())
        return detail, status.HTTP_200_OK
