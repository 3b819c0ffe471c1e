"""Delivery API views.

Quotes and zone listing are public; zone updates are staff-only.
"""

from __future__ import annotations

from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError, NotFound, error_response
from modules.delivery.dtos import QuoteRequestDTO, UpdateZoneDTO
from modules.delivery.models import DeliveryZone
from modules.delivery.repositories.django_repository import DeliveryZoneDjangoRepository
from modules.delivery.serializers import (
    DeliveryCostSerializer,
    DeliveryZoneSerializer,
    UpdateZoneSerializer,
)
from modules.delivery.services import DeliveryService
from modules.locations.repositories.django_repository import LocationDjangoRepository


def build_delivery_service() -> DeliveryService:
    return DeliveryService(
        zone_repository=DeliveryZoneDjangoRepository(),
        location_repository=LocationDjangoRepository(),
    )


class DeliveryCostView(APIView):
    """POST /api/v1/delivery/cost/

    Unknown wilayas and missing zones are reported as ``NOT_FOUND``.
    """

    permission_classes = [AllowAny]
    throttle_scope = "delivery_quote"

    def post(self, request: Request) -> Response:
        serializer = DeliveryCostSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dto = QuoteRequestDTO(
            wilaya_id=data["wilaya_id"],
            merchandise_total=data["total_amount"],
            weight_kg=data.get("weight"),
            item_count=data["item_count"],
            is_express=data["is_express"],
            delivery_type=data["delivery_type"],
        )
        try:
            result = build_delivery_service().quote(dto)
        except NotFound as exc:
            return error_response(exc, code="NOT_FOUND")
        except DomainError as exc:
            return error_response(exc, code="VALIDATION_ERROR")
        return Response(result.model_dump(mode="json"))


class DeliveryEstimateView(APIView):
    """GET /api/v1/delivery/estimate/{wilaya_id}/?express=true"""

    permission_classes = [AllowAny]

    def get(self, request: Request, wilaya_id: int) -> Response:
        is_express = request.query_params.get("express", "").lower() in {"1", "true", "yes"}
        try:
            window = build_delivery_service().estimate_window(wilaya_id, is_express)
        except DomainError as exc:
            return error_response(exc)
        return Response({"wilaya_id": wilaya_id, "is_express": is_express, **window})


class DeliveryZoneViewSet(GenericViewSet):
    """Delivery zones, addressed by wilaya id."""

    queryset = DeliveryZone.objects.select_related("wilaya")
    pagination_class = None
    lookup_field = "wilaya_id"
    lookup_value_regex = r"-?\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_delivery_service()

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return [IsAdminUser()]

    def list(self, request: Request) -> Response:
        """GET /api/v1/delivery/zones/"""
        zones = self._service.list_zones()
        return Response(DeliveryZoneSerializer(zones, many=True).data)

    def partial_update(self, request: Request, wilaya_id: str | None = None) -> Response:
        """PATCH /api/v1/delivery/zones/{wilaya_id}/"""
        serializer = UpdateZoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            zone = self._service.update_zone(
                int(wilaya_id), UpdateZoneDTO(**serializer.validated_data)
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(DeliveryZoneSerializer(zone).data)
