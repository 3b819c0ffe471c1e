"""Delivery repositories package."""

from modules.delivery.repositories.django_repository import DeliveryZoneDjangoRepository
from modules.delivery.repositories.interfaces import IDeliveryZoneRepository

__all__ = ["DeliveryZoneDjangoRepository", "IDeliveryZoneRepository"]
