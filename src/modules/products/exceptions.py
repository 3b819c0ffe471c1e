"""Inventory exceptions.

Raised by the order service while reserving stock; rendered by the order
views with their ``code``.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class ProductNotFound(NotFound):
    """The product does not exist or is inactive."""

    code = "PRODUCT_NOT_FOUND"


class InsufficientStock(Conflict):
    """Not enough stock to fulfil the requested quantity."""

    code = "INSUFFICIENT_STOCK"
