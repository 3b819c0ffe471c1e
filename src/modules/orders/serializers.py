"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

import re

from rest_framework import serializers

from modules.customers.models import normalize_phone
from modules.delivery.constants import DeliveryType
from modules.locations.models import Wilaya
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.models import Order, OrderItem, OrderStatusHistory

PHONE_RE = re.compile(r"\+?\d{6,15}")

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload.

    Any delivery cost sent by the client is ignored.
    """

    customer_name = serializers.CharField(max_length=255)
    customer_phone = serializers.CharField(max_length=30)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    wilaya_id = serializers.IntegerField(min_value=Wilaya.MIN_ID, max_value=Wilaya.MAX_ID)
    baladiya_id = serializers.IntegerField(min_value=1)
    delivery_address = serializers.CharField()
    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices,
        required=False,
        default=PaymentMethod.CASH_ON_DELIVERY,
    )
    delivery_type = serializers.ChoiceField(
        choices=DeliveryType.choices, required=False, default=DeliveryType.HOME
    )
    is_express = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, default="", allow_blank=True)

    def validate_customer_phone(self, value: str) -> str:
        phone = normalize_phone(value)
        if not PHONE_RE.fullmatch(phone):
            raise serializers.ValidationError("Invalid phone number.")
        return phone

    def validate_items(self, value):
        product_ids = [item["product_id"] for item in value]
        if len(product_ids) != len(set(product_ids)):
            raise serializers.ValidationError(
                "Duplicate product IDs are not allowed in the same order."
            )
        return value


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)

    def validate_status(self, value: str) -> str:
        if value == OrderStatus.CANCELLED:
            raise serializers.ValidationError(
                "Use the /cancel/ endpoint for cancellations."
            )
        return value


class CancelOrderSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with product snapshot."""

    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "changed_by",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class _DestinationMixin(serializers.Serializer):
    wilaya = serializers.SerializerMethodField()
    baladiya = serializers.SerializerMethodField()
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    def get_wilaya(self, obj: Order):
        return {"id": obj.wilaya.id, "name": obj.wilaya.name, "code": obj.wilaya.code}

    def get_baladiya(self, obj: Order):
        return {"id": obj.baladiya.id, "name": obj.baladiya.name}


class OrderSerializer(_DestinationMixin, serializers.ModelSerializer):
    """Read serializer for orders with customer, items and history."""

    customer = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "tracking_number",
            "status",
            "customer",
            "wilaya",
            "baladiya",
            "delivery_address",
            "delivery_type",
            "is_express",
            "payment_method",
            "total_amount",
            "delivery_cost",
            "grand_total",
            "delivery_breakdown",
            "estimated_days",
            "notes",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields

    def get_customer(self, obj: Order):
        customer = obj.customer
        return {
            "id": str(customer.id),
            "name": customer.name,
            "phone": customer.phone,
            "email": customer.email,
        }


class OrderListSerializer(_DestinationMixin, serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested items)."""

    customer_name = serializers.CharField(source="customer.name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "tracking_number",
            "status",
            "customer_name",
            "wilaya",
            "baladiya",
            "total_amount",
            "delivery_cost",
            "grand_total",
            "created_at",
        ]
        read_only_fields = fields


class OrderTrackingSerializer(_DestinationMixin, serializers.ModelSerializer):
    """Public tracking view: never exposes customer identity or address."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "tracking_number",
            "status",
            "wilaya",
            "baladiya",
            "delivery_type",
            "is_express",
            "total_amount",
            "delivery_cost",
            "grand_total",
            "estimated_days",
            "created_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields

    def get_status_history(self, obj: Order):
        return [
            {"status": history.new_status, "at": history.created_at.isoformat()}
            for history in obj.status_history.all()
        ]
