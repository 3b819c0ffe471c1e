"""Delivery zone repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.delivery.models import DeliveryZone


class IDeliveryZoneRepository(IRepository["DeliveryZone"]):
    @abstractmethod
    def get_for_wilaya(self, wilaya_id: int) -> Optional[DeliveryZone]:
        """Zone of a wilaya (active or not), wilaya loaded."""

    @abstractmethod
    def get_active_for_wilaya(self, wilaya_id: int) -> Optional[DeliveryZone]:
        """Active zone of a wilaya, or ``None``."""

    @abstractmethod
    def list_active(self) -> List[DeliveryZone]:
        """Active zones ordered by wilaya id."""

    @abstractmethod
    def update(self, zone: DeliveryZone, changes: Dict[str, Any]) -> DeliveryZone:
        """Apply field changes to a zone and persist them."""
