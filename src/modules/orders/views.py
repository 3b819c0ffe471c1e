"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Checkout and
tracking are public; everything else is staff-only.  Domain exceptions
are rendered with their own code; any other failure during creation is
logged and reported as ``CREATE_ORDER_ERROR`` without internal detail.
"""

from __future__ import annotations

import pydantic
import structlog
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError, error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.dtos import CustomerInfoDTO
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.delivery.views import build_delivery_service
from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.locations.services import LocationService
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import OrderCreationFailed
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderTrackingSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = structlog.get_logger(__name__)

PUBLIC_ACTIONS = {"create", "track"}


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        location_service=LocationService(LocationDjangoRepository()),
        delivery_service=build_delivery_service(),
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["tracking_number", "customer__name", "customer__phone"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAdminUser()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttle scopes per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "track"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        idempotency_key = request.headers.get("Idempotency-Key") or None
        try:
            dto = CreateOrderDTO(
                customer=CustomerInfoDTO(
                    name=data["customer_name"],
                    phone=data["customer_phone"],
                    email=data["customer_email"] or None,
                ),
                wilaya_id=data["wilaya_id"],
                baladiya_id=data["baladiya_id"],
                delivery_address=data["delivery_address"],
                items=[
                    CreateOrderItemDTO(
                        product_id=item["product_id"],
                        quantity=item["quantity"],
                    )
                    for item in data["items"]
                ],
                payment_method=data["payment_method"],
                delivery_type=data["delivery_type"],
                is_express=data["is_express"],
                notes=data["notes"],
                idempotency_key=idempotency_key,
            )
        except pydantic.ValidationError as exc:
            raise ValidationError(
                {"non_field_errors": [error["msg"] for error in exc.errors()]}
            ) from exc

        try:
            order = self._service.create_order(dto)
        except DomainError as exc:
            return error_response(exc)
        except Exception:
            logger.exception("order.creation_failed")
            return error_response(OrderCreationFailed())

        out = OrderSerializer(order)
        replayed = getattr(order, "is_replay", False)
        return Response(
            out.data,
            status=status.HTTP_200_OK if replayed else status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, wilaya, phone, date range, total range) is
        handled by ``OrderFilter``; ordering by ``OrderingFilter``.
        Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except DomainError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"track/(?P<tracking_number>[A-Za-z0-9]+)",
    )
    def track(self, request: Request, tracking_number: str | None = None) -> Response:
        """GET /api/v1/orders/track/{tracking_number}/"""
        try:
            order = self._service.get_by_tracking_number(tracking_number or "")
        except DomainError as exc:
            return error_response(exc)
        return Response(OrderTrackingSerializer(order).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Updates order status.  Cancellations are **not** allowed via
        this endpoint; use ``POST /orders/{id}/cancel/`` instead.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=serializer.validated_data["status"],
                notes=serializer.validated_data["notes"],
                changed_by=request.user.get_username(),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel (dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels an order and releases its reserved stock.
        """
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = self._service.cancel_order(
                order_id=pk,
                notes=serializer.validated_data["notes"],
                changed_by=request.user.get_username(),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)
