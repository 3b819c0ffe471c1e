"""Delivery domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class NoActiveDeliveryZone(NotFound):
    """The wilaya has no active delivery zone."""

    code = "NO_ACTIVE_DELIVERY_ZONE"


class DeliveryZoneNotFound(NotFound):
    """The wilaya has no delivery zone configured."""

    code = "DELIVERY_ZONE_NOT_FOUND"
