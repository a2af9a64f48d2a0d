"""Cafe domain API package."""

from cafe.api.errors import register_error_handlers
from cafe.api.routes import items_router, orders_router, tax_router

__all__ = ["items_router", "orders_router", "tax_router", "register_error_handlers"]
