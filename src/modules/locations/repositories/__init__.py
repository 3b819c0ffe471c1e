"""Location repositories package."""

from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.locations.repositories.interfaces import ILocationRepository

__all__ = ["ILocationRepository", "LocationDjangoRepository"]
