"""Centralized JSON error handling for the service."""

from flask import current_app as app
from werkzeug.exceptions import HTTPException

from service.api import api
from service.common.cache import CacheComputeError
from service.common.rate_limiter import RateLimitExceeded
from service.models import DataValidationError
from service.models.base import ResourceNotFoundError
from . import status


def _format_error_details(errors) -> str | None:
    """Format validation error details into a readable string."""
    if not errors:
        return None
    if isinstance(errors, dict):
        return "; ".join(f"{field}: {msg}" for field, msg in errors.items())
    return str(errors)


def _message_from_http_data(error) -> str | None:
    """Extract messages from HTTPException-like objects carrying .data."""
    data = getattr(error, "data", None)
    if data is None:
        return None
    formatted = _format_error_details(data.get("errors") if isinstance(data, dict) else None)
    if formatted:
        return formatted
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return None


def _extract_message(error) -> str:
    """Return a human-friendly message for the given error."""
    resolvers = (
        _message_from_http_data,
        lambda err: getattr(err, "description", None),
        lambda err: getattr(err, "message", None),
    )
    for resolver in resolvers:
        message = resolver(error)
        if message:
            return str(message)
    return str(error)


def _code_from_name(name: str) -> str:
    """'Method Not Allowed' -> 'METHOD_NOT_ALLOWED'"""
    return "_".join(name.upper().split())


def _json_error(
    code: int,
    error_name: str,
    error_code: str,
    message: str,
    *,
    details=None,
    log_as_error: bool = False,
) -> dict:
    """Build and log a JSON error body."""
    logger = app.logger.error if log_as_error else app.logger.warning
    logger(message)
    body = {"status": code, "error": error_name, "code": error_code, "message": message}
    if details:
        body["details"] = details
    return body


@app.errorhandler(DataValidationError)
@api.errorhandler(DataValidationError)
def handle_validation_error(error):
    """Return 400 for validation failures with a JSON body."""
    body = _json_error(
        status.HTTP_400_BAD_REQUEST,
        "Bad Request",
        error.code,
        _extract_message(error),
        details=error.details,
    )
    return body, status.HTTP_400_BAD_REQUEST


@app.errorhandler(ResourceNotFoundError)
@api.errorhandler(ResourceNotFoundError)
def handle_not_found(error):
    """Return 404 when a cart or item does not exist."""
    body = _json_error(status.HTTP_404_NOT_FOUND, "Not Found", error.code, error.message)
    return body, status.HTTP_404_NOT_FOUND


@app.errorhandler(RateLimitExceeded)
@api.errorhandler(RateLimitExceeded)
def handle_rate_limit_exceeded(error):
    """Return 429 with the rate limit headers recorded for the request."""
    body = _json_error(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too Many Requests",
        error.code,
        error.message,
    )
    return body, status.HTTP_429_TOO_MANY_REQUESTS, error.headers


@app.errorhandler(HTTPException)
@api.errorhandler(HTTPException)
def handle_http_exception(error):
    """Ensure all HTTPException responses are JSON."""
    code = getattr(error, "code", None) or status.HTTP_500_INTERNAL_SERVER_ERROR
    name = getattr(error, "name", "HTTPException")
    body = _json_error(
        code,
        name,
        _code_from_name(name),
        _extract_message(error),
        log_as_error=code >= 500,
    )
    return body, code


@app.errorhandler(CacheComputeError)
@api.errorhandler(CacheComputeError)
def handle_cache_compute_error(error):
    """Answer as if the wrapped error had been raised directly."""
    original = error.original
    for error_type, handler in _HANDLERS:
        if isinstance(original, error_type):
            return handler(original)
    return handle_unhandled_exception(original)


@app.errorhandler(Exception)
@api.errorhandler(Exception)
def handle_unhandled_exception(error):
    """Catch-all handler to guarantee JSON 500 responses."""
    app.logger.exception("Unhandled exception: %s", error)
    body = _json_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred.",
        log_as_error=True,
    )
    return body, status.HTTP_500_INTERNAL_SERVER_ERROR


_HANDLERS = (
    (DataValidationError, handle_validation_error),
    (ResourceNotFoundError, handle_not_found),
    (RateLimitExceeded, handle_rate_limit_exceeded),
    (HTTPException, handle_http_exception),
)


# Convenience exports for any direct tests/imports
__all__ = [
    "handle_cache_compute_error",
    "handle_http_exception",
    "handle_not_found",
    "handle_rate_limit_exceeded",
    "handle_unhandled_exception",
    "handle_validation_error",
]
