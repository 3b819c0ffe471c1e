"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Inventory
and location errors raised during creation live in their own modules
(``ProductNotFound``, ``InsufficientStock``, ``WilayaNotFound``,
``InvalidBaladiya``).
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, InternalFailure, NotFound, ValidationFailed


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    code = "ORDER_NOT_FOUND"


class InvalidOrderStatus(ValidationFailed):
    """The status transition is not allowed."""

    code = "INVALID_STATUS"
    attr = "status"


class TrackingNumberConflict(Exception):
    """The generated tracking number is already taken (retriable)."""


class IdempotencyKeyConflict(Exception):
    """Another request already stored an order under this idempotency key."""


class TrackingGenerationExhausted(Conflict):
    """Could not allocate a unique tracking number, try again."""

    code = "TRACKING_GENERATION_EXHAUSTED"


class OrderCreationFailed(InternalFailure):
    """The order could not be created."""

    code = "CREATE_ORDER_ERROR"
