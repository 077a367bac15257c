"""
Item Resource for Flask-RESTX
"""
from flask import current_app as app, request
from flask_restx import Namespace, Resource, fields

from service.cart_cache import cart_cache
from service.common import status
from service.models import DataValidationError, InvalidItemError, InvalidQuantityError
from service.models.base import field_errors
from service.resources.carts import (
    cart_item_model,
    cart_model,
    get_cart_or_404,
    message_model,
)
from service.routes import check_content_type

# Create a namespace for items
ns = Namespace(
    "items",
    description="Cart item operations",
    path="/carts/<string:cart_id>/items",
)

######################################################################
# Swagger Models
######################################################################

# ItemCreate model for POST requests
item_create_model = ns.model(
    "ItemCreate",
    {
        "productId": fields.Integer(required=True, description="The product ID", min=1),
        "productName": fields.String(required=True, description="Product name", max_length=255),
        "price": fields.Float(required=True, description="Unit price", min=0.0),
        "quantity": fields.Integer(required=True, description="Item quantity", min=1),
        "category": fields.String(required=False, description="Product category", max_length=255),
        "sku": fields.String(required=False, description="Stock keeping unit", max_length=255),
    },
)

# ItemUpdate model for PATCH requests
item_update_model = ns.model(
    "ItemUpdate",
    {
        "quantity": fields.Integer(required=True, description="New quantity (must be positive)", min=1),
    },
)

REQUIRED_ITEM_FIELDS = ("productId", "productName", "price", "quantity")

# JSON types accepted for each payload field
ITEM_FIELD_TYPES = {
    "productId": ((int,), "int"),
    "productName": ((str,), "string"),
    "price": ((int, float), "float"),
    "quantity": ((int,), "int"),
    "category": ((str,), "string"),
    "sku": ((str,), "string"),
}


######################################################################
# Helper Functions
######################################################################
def _json_type_name(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (list, dict)):
        return "array"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _type_errors(payload: dict) -> dict:
    """Collect fields whose JSON type does not match the item schema."""
    errors = {}
    for field, (types, expected) in ITEM_FIELD_TYPES.items():
        value = payload.get(field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, types):
            errors[field] = (
                f'The type must be "{expected}", "{_json_type_name(value)}" given.'
            )
    return errors


def _require_json_object():
    """Return the request body, which must be a JSON object."""
    payload = request.get_json()
    if not isinstance(payload, dict):
        raise DataValidationError("Request body must be a JSON object")
    return payload


def _parse_item_payload(payload: dict) -> dict:
    """Check presence and types of the add-item fields."""
    missing = [field for field in REQUIRED_ITEM_FIELDS if payload.get(field) is None]
    if missing:
        raise InvalidItemError(
            " | ".join(f"{field[0].upper()}{field[1:]} required" for field in missing),
            code="|".join(f"{field.upper()}_REQUIRED" for field in missing),
        )

    errors = _type_errors(payload)
    if errors:
        raise InvalidItemError(
            "Validation failed", details=field_errors(errors, "INVALID_TYPE")
        )

    return {
        "product_id": payload["productId"],
        "product_name": payload["productName"],
        "price": payload["price"],
        "quantity": payload["quantity"],
        "category": payload.get("category"),
        "sku": payload.get("sku"),
    }


def _parse_quantity(payload: dict) -> int:
    """Extract the new quantity from a PATCH body."""
    quantity = payload.get("quantity")
    if quantity is None:
        raise InvalidQuantityError("Quantity required", code="QUANTITY_REQUIRED")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(
            "Validation failed",
            details=field_errors(
                {"quantity": f'The type must be "int", "{_json_type_name(quantity)}" given.'},
                "INVALID_TYPE",
            ),
        )
    if quantity <= 0:
        raise InvalidQuantityError(
            "Validation failed",
            details=field_errors({"quantity": "Quantity must be greater than 0"}),
        )
    return quantity


######################################################################
# Resource Classes
######################################################################


@ns.route("")
@ns.param("cart_id", "The Cart identifier")
class ItemCollection(Resource):
    """Handles all operations for a collection of Items"""

    @ns.doc("create_item")
    @ns.expect(item_create_model)
    @ns.response(201, "Item added", cart_model)
    @ns.response(400, "Bad Request", message_model)
    @ns.response(404, "Cart not found", message_model)
    @ns.response(415, "Unsupported Media Type", message_model)
    def post(self, cart_id):
        """Add an Item to a Cart"""
        app.logger.info("Request to add item to cart %s", cart_id)
        check_content_type("application/json")

        cart = get_cart_or_404(cart_id)
        item_fields = _parse_item_payload(_require_json_object())
        item = cart.add_item(**item_fields)
        cart.update()
        cart_cache.invalidate_cart(cart.id)
        app.logger.info("Item %s added to cart %s", item.id, cart.id)

        return cart.to_detail(), status.HTTP_201_CREATED


@ns.route("/<string:item_id>")
@ns.param("cart_id", "The Cart identifier")
@ns.param("item_id", "The Item identifier")
class ItemResource(Resource):
    """Handles all operations for a single Item"""

    @ns.doc("update_item")
    @ns.expect(item_update_model)
    @ns.response(200, "Item updated", cart_item_model)
    @ns.response(400, "Bad Request", message_model)
    @ns.response(404, "Cart or Item not found", message_model)
    def patch(self, cart_id, item_id):
        """Change the quantity of an item in a cart"""
        app.logger.info(
            "Request to update item %s in cart %s", item_id, cart_id
        )
        check_content_type("application/json")

        cart = get_cart_or_404(cart_id)
        quantity = _parse_quantity(_require_json_object())
        item = cart.set_item_quantity(item_id, quantity)
        cart.update()
        cart_cache.invalidate_cart(cart.id)

        return item.serialize(), status.HTTP_200_OK

    @ns.doc("delete_item")
    @ns.response(204, "Item deleted successfully")
    @ns.response(404, "Cart or Item not found", message_model)
    def delete(self, cart_id, item_id):
        """Delete an existing item from a cart"""
        app.logger.info(
            "Request to delete item %s from cart %s", item_id, cart_id
        )
        cart = get_cart_or_404(cart_id)
        cart.remove_item(item_id)
        cart.update()
        cart_cache.invalidate_cart(cart.id)
        app.logger.info(
            "Item %s deleted successfully from cart %s",
            item_id,
            cart_id,
        )

        return "", status.HTTP_204_NO_CONTENT
