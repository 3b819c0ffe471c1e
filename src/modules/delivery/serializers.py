"""Delivery DRF serializers."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.delivery.constants import DeliveryType
from modules.delivery.models import DeliveryZone
from modules.locations.models import Wilaya

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class DeliveryCostSerializer(serializers.Serializer):
    """Validates a delivery-cost request."""

    wilaya_id = serializers.IntegerField(min_value=Wilaya.MIN_ID, max_value=Wilaya.MAX_ID)
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    weight = serializers.DecimalField(
        max_digits=8,
        decimal_places=3,
        min_value=Decimal("0.001"),
        required=False,
        allow_null=True,
    )
    item_count = serializers.IntegerField(min_value=0, required=False, default=0)
    is_express = serializers.BooleanField(required=False, default=False)
    delivery_type = serializers.ChoiceField(
        choices=DeliveryType.choices, required=False, default=DeliveryType.HOME
    )


class UpdateZoneSerializer(serializers.Serializer):
    home_delivery_cost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    office_delivery_cost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    estimated_days = serializers.IntegerField(min_value=1, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field must be provided.")
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class DeliveryZoneSerializer(serializers.ModelSerializer):
    wilaya_name = serializers.CharField(source="wilaya.name", read_only=True)
    wilaya_code = serializers.CharField(source="wilaya.code", read_only=True)
    base_cost = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = DeliveryZone
        fields = [
            "wilaya_id",
            "wilaya_name",
            "wilaya_code",
            "home_delivery_cost",
            "office_delivery_cost",
            "base_cost",
            "estimated_days",
            "is_active",
            "updated_at",
        ]
        read_only_fields = fields
