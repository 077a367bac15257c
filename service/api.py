"""Shared Flask-RESTX API configuration for the Cart service."""

from flask_restx import Api

# Centralized API instance so namespaces can be registered in one place.
api = Api(
    title="Cart REST API Service",
    version="1.0.0",
    description="This service manages shopping carts and their items.",
    prefix="/api",
    doc="/apidocs/",
)

# Import and register namespaces
# pylint: disable=import-outside-toplevel


def register_namespaces():
    """Register all API namespaces"""
    from service.resources.carts import ns as carts_namespace
    from service.resources.items import ns as items_namespace

    for namespace in (carts_namespace, items_namespace):
        if namespace not in api.namespaces:
            api.add_namespace(namespace)


__all__ = ["api", "register_namespaces"]
