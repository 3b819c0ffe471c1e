"""Delivery service layer.

Resolves a wilaya's delivery zone and runs the pricing engine on it.
``quote`` is the only source of delivery costs: order creation calls it
too, so client-supplied costs are never trusted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

import structlog

from modules.delivery.exceptions import DeliveryZoneNotFound, NoActiveDeliveryZone
from modules.delivery.pricing import PricingPolicy, ZoneRates, estimated_days, quote
from modules.locations.exceptions import WilayaNotFound
from modules.locations.services import LocationService

if TYPE_CHECKING:
    from modules.delivery.dtos import DeliveryQuoteDTO, QuoteRequestDTO, UpdateZoneDTO
    from modules.delivery.models import DeliveryZone
    from modules.delivery.repositories.interfaces import IDeliveryZoneRepository
    from modules.locations.repositories.interfaces import ILocationRepository

logger = structlog.get_logger(__name__)


class DeliveryService:
    """Application service for delivery quotes and zone administration.

    ``policy`` defaults to the one built from settings at call time.
    """

    def __init__(
        self,
        zone_repository: IDeliveryZoneRepository,
        location_repository: ILocationRepository,
        policy: Optional[PricingPolicy] = None,
    ) -> None:
        self._zone_repo = zone_repository
        self._location_repo = location_repository
        self._policy = policy

    @property
    def policy(self) -> PricingPolicy:
        return self._policy or PricingPolicy.from_settings()

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def quote(self, request: QuoteRequestDTO) -> DeliveryQuoteDTO:
        """Compute an authoritative delivery quote.

        Raises:
            InvalidWilaya: id outside 1-58.
            WilayaNotFound: wilaya not seeded.
            NoActiveDeliveryZone: no zone, or zone disabled.
        """
        zone = self._active_zone(request.wilaya_id)
        result = quote(ZoneRates.from_zone(zone), request, self.policy)
        logger.info(
            "delivery.quoted",
            wilaya_id=request.wilaya_id,
            delivery_type=str(request.delivery_type),
            is_express=request.is_express,
            free_delivery=result.free_delivery,
            delivery_cost=str(result.delivery_cost),
        )
        return result

    def estimate_window(self, wilaya_id: int, is_express: bool = False) -> Dict[str, int]:
        """Transit window in days: ``{"min": d, "max": d + 1}``."""
        zone = self._active_zone(wilaya_id)
        days = estimated_days(zone.estimated_days, is_express)
        return {"min": days, "max": days + 1}

    # ------------------------------------------------------------------
    # Zones
    # ------------------------------------------------------------------

    def list_zones(self) -> List[DeliveryZone]:
        return self._zone_repo.list_active()

    def update_zone(self, wilaya_id: int, dto: UpdateZoneDTO) -> DeliveryZone:
        """Admin update of a zone's tariff, transit days or active flag.

        Raises:
            InvalidWilaya: id outside 1-58.
            DeliveryZoneNotFound: the wilaya has no zone.
        """
        LocationService.validate_wilaya_id(wilaya_id)
        zone = self._zone_repo.get_for_wilaya(wilaya_id)
        if not zone:
            raise DeliveryZoneNotFound(f"No delivery zone for wilaya {wilaya_id}.")
        return self._zone_repo.update(zone, dto.changes())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _active_zone(self, wilaya_id: int) -> DeliveryZone:
        LocationService.validate_wilaya_id(wilaya_id)
        if not self._location_repo.get_by_id(wilaya_id):
            raise WilayaNotFound(f"Wilaya {wilaya_id} not found.", attr="wilaya_id")
        zone = self._zone_repo.get_active_for_wilaya(wilaya_id)
        if not zone:
            raise NoActiveDeliveryZone(
                f"No active delivery zone for wilaya {wilaya_id}.", attr="wilaya_id"
            )
        return zone
