"""Django ORM implementation of the delivery zone repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.delivery.models import DeliveryZone
from modules.delivery.repositories.interfaces import IDeliveryZoneRepository

logger = structlog.get_logger(__name__)


class DeliveryZoneDjangoRepository(IDeliveryZoneRepository):
    """Concrete delivery zone repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[DeliveryZone]:
        try:
            return DeliveryZone.objects.select_related("wilaya").filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[DeliveryZone]:
        queryset = DeliveryZone.objects.select_related("wilaya")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: DeliveryZone) -> DeliveryZone:
        entity.save()
        return entity

    def get_for_wilaya(self, wilaya_id: int) -> Optional[DeliveryZone]:
        return DeliveryZone.objects.select_related("wilaya").filter(wilaya_id=wilaya_id).first()

    def get_active_for_wilaya(self, wilaya_id: int) -> Optional[DeliveryZone]:
        return (
            DeliveryZone.objects.select_related("wilaya")
            .filter(wilaya_id=wilaya_id, is_active=True)
            .first()
        )

    def list_active(self) -> List[DeliveryZone]:
        return list(
            DeliveryZone.objects.select_related("wilaya")
            .filter(is_active=True)
            .order_by("wilaya_id")
        )

    @transaction.atomic
    def update(self, zone: DeliveryZone, changes: Dict[str, Any]) -> DeliveryZone:
        for field, value in changes.items():
            setattr(zone, field, value)
        zone.save(update_fields=list(changes))
        logger.info(
            "delivery.zone_updated",
            wilaya_id=zone.wilaya_id,
            fields=sorted(changes),
        )
        return zone
