"""Behave environment configuration for API scenarios."""

from __future__ import annotations

import os
from urllib.parse import urljoin

import requests

WAIT_TIMEOUT = 10


def before_all(context):
    """Point every scenario at the running service."""
    base_url = os.getenv("BASE_URL", "http://127.0.0.1:8080")
    context.base_url = base_url.rstrip("/")
    context.session = requests.Session()


def before_scenario(context, _scenario):
    context.cart = None
    context.item = None
    context.response = None


def after_all(context):
    """Close the shared HTTP session."""
    if getattr(context, "session", None):
        context.session.close()


def create_cart_via_api(context) -> dict:
    """Create an empty cart through the REST API."""
    response = context.session.post(_api_url(context, "carts"), timeout=WAIT_TIMEOUT)
    response.raise_for_status()
    return response.json()


def _api_url(context, path: str) -> str:
    """Build a URL rooted at the running service's /api prefix."""
    return urljoin(context.base_url + "/api/", path.lstrip("/"))
