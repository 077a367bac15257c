"""
Shared database utilities and error types for models.
"""
import logging
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger("flask.app")

# Global SQLAlchemy handle initialized in the app factory
db = SQLAlchemy()


def utcnow() -> datetime:
    """Timezone-aware current time used for every model timestamp."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate an opaque identifier for a cart or cart item."""
    return str(uuid.uuid4())


def field_errors(errors: dict, code: str = "INVALID_VALUE") -> dict:
    """Expand field -> message pairs into field -> {message, code}."""
    return {field: {"message": message, "code": code} for field, message in errors.items()}


def to_iso(value):
    """Return an ISO8601 string, treating naive values as UTC."""
    if not value:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


######################################################################
# Errors
######################################################################
class DataValidationError(Exception):
    """Used for data validation errors when deserializing"""

    code = "BAD_REQUEST"
    details = None


class FieldValidationError(DataValidationError):
    """Validation failure that can report a message per offending field."""

    code = "VALIDATION_ERROR"

    def __init__(self, message="Validation failed", details=None, code=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code:
            self.code = code


class InvalidItemError(FieldValidationError):
    """Raised when a cart item is built from invalid product data"""


class InvalidQuantityError(FieldValidationError):
    """Raised when an item quantity update is not a positive integer"""


class ResourceNotFoundError(Exception):
    """Base class for lookups that found nothing"""

    code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CartNotFoundError(ResourceNotFoundError):
    """Raised when a cart id does not exist"""

    code = "CART_NOT_FOUND"
    default_message = "Cart not found"


class ItemNotFoundError(ResourceNotFoundError):
    """Raised when an item id is not part of the cart"""

    code = "ITEM_NOT_FOUND"
    default_message = "Item not found"


class CRUDMixin:
    """Common create/update/delete helpers with consistent error handling."""

    def _perform_db_action(self, action: str, work):
        """Execute a DB action and handle rollback/logging on failure."""
        try:
            work()
            db.session.commit()
        except Exception as error:  # pylint: disable=broad-except
            db.session.rollback()
            logger.error("Error %s record: %s", action, self)
            raise DataValidationError(error) from error

    def create(self):
        """Add the record to the session and commit."""
        self._perform_db_action("creating", lambda: db.session.add(self))

    def update(self):
        """Commit pending changes for this record."""
        self._perform_db_action("updating", lambda: None)

    def delete(self):
        """Delete the record from the session and commit."""
        self._perform_db_action("deleting", lambda: db.session.delete(self))
