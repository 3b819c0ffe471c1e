"""Location catalog API views (public, read-only)."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError, error_response
from modules.locations.models import Wilaya
from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.locations.serializers import (
    BaladiyaSearchSerializer,
    BaladiyaSerializer,
    LocationSearchQuerySerializer,
    WilayaDetailSerializer,
    WilayaSerializer,
)
from modules.locations.services import LocationService


class WilayaViewSet(GenericViewSet):
    """Wilayas and their baladiyas.

    The catalog is small (58 rows) and returned unpaginated.
    """

    queryset = Wilaya.objects.all()
    permission_classes = [AllowAny]
    pagination_class = None
    lookup_value_regex = r"-?\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = LocationService(location_repository=LocationDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/wilayas/"""
        wilayas = self._service.list_wilayas()
        return Response(WilayaSerializer(wilayas, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/wilayas/{pk}/"""
        try:
            wilaya = self._service.get_wilaya(int(pk))
        except DomainError as exc:
            return error_response(exc)
        return Response(WilayaDetailSerializer(wilaya).data)

    @action(detail=True, methods=["get"])
    def baladiyas(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/wilayas/{pk}/baladiyas/"""
        try:
            baladiyas = self._service.list_baladiyas(int(pk))
        except DomainError as exc:
            return error_response(exc)
        return Response(BaladiyaSerializer(baladiyas, many=True).data)


class LocationSearchView(APIView):
    """GET /api/v1/locations/search/?q=&type=&limit="""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        params = LocationSearchQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        service = LocationService(location_repository=LocationDjangoRepository())
        try:
            results = service.search(data["q"], type=data["type"], limit=data["limit"])
        except DomainError as exc:
            return error_response(exc)

        wilayas = WilayaSerializer(results["wilayas"], many=True).data
        baladiyas = BaladiyaSearchSerializer(results["baladiyas"], many=True).data
        return Response(
            {
                "query": data["q"],
                "wilayas": wilayas,
                "baladiyas": baladiyas,
                "count": len(wilayas) + len(baladiyas),
            }
        )
