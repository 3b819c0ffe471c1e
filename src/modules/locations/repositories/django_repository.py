"""Django ORM implementation of the location catalog repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.db.models import Count, Q

from modules.locations.models import Baladiya, Wilaya
from modules.locations.repositories.interfaces import ILocationRepository


class LocationDjangoRepository(ILocationRepository):
    """Concrete location repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Wilaya]:
        try:
            return Wilaya.objects.filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Wilaya]:
        queryset = Wilaya.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def save(self, entity: Wilaya) -> Wilaya:
        entity.save()
        return entity

    def get_with_details(self, id: int) -> Optional[Wilaya]:
        return (
            Wilaya.objects.select_related("delivery_zone")
            .prefetch_related("baladiyas")
            .annotate(baladiya_count=Count("baladiyas"))
            .filter(id=id)
            .first()
        )

    def list_with_counts(self) -> List[Wilaya]:
        return list(
            Wilaya.objects.annotate(baladiya_count=Count("baladiyas")).order_by("id")
        )

    def get_baladiya(self, id: int) -> Optional[Baladiya]:
        try:
            return Baladiya.objects.select_related("wilaya").filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list_baladiyas(self, wilaya_id: int) -> List[Baladiya]:
        return list(Baladiya.objects.filter(wilaya_id=wilaya_id).order_by("name"))

    def search_wilayas(self, query: str, limit: int) -> List[Wilaya]:
        return list(
            Wilaya.objects.filter(
                Q(name__icontains=query)
                | Q(name_latin__icontains=query)
                | Q(code__icontains=query)
            ).order_by("id")[:limit]
        )

    def search_baladiyas(self, query: str, limit: int) -> List[Baladiya]:
        return list(
            Baladiya.objects.select_related("wilaya")
            .filter(
                Q(name__icontains=query)
                | Q(name_latin__icontains=query)
                | Q(postal_code__icontains=query)
            )
            .order_by("name")[:limit]
        )
