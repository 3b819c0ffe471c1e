"""Location catalog DRF serializers (read-only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.locations.models import Baladiya, Wilaya


class BaladiyaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Baladiya
        fields = ["id", "name", "name_latin", "postal_code", "wilaya_id"]
        read_only_fields = fields


class WilayaSerializer(serializers.ModelSerializer):
    """List representation with the annotated baladiya count."""

    baladiya_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Wilaya
        fields = ["id", "name", "name_latin", "code", "baladiya_count"]
        read_only_fields = fields


class WilayaZoneSerializer(serializers.Serializer):
    home_delivery_cost = serializers.DecimalField(max_digits=10, decimal_places=2)
    office_delivery_cost = serializers.DecimalField(max_digits=10, decimal_places=2)
    estimated_days = serializers.IntegerField()
    is_active = serializers.BooleanField()


class WilayaDetailSerializer(WilayaSerializer):
    """Detail representation with baladiyas and the delivery zone."""

    baladiyas = BaladiyaSerializer(many=True, read_only=True)
    delivery_zone = serializers.SerializerMethodField()

    class Meta(WilayaSerializer.Meta):
        fields = WilayaSerializer.Meta.fields + ["baladiyas", "delivery_zone"]
        read_only_fields = fields

    def get_delivery_zone(self, obj: Wilaya):
        zone = getattr(obj, "delivery_zone", None)
        if zone is None:
            return None
        return WilayaZoneSerializer(zone).data


class BaladiyaSearchSerializer(BaladiyaSerializer):
    wilaya_name = serializers.CharField(source="wilaya.name", read_only=True)

    class Meta(BaladiyaSerializer.Meta):
        fields = BaladiyaSerializer.Meta.fields + ["wilaya_name"]
        read_only_fields = fields


class LocationSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(min_length=2, trim_whitespace=True)
    type = serializers.ChoiceField(
        choices=["wilaya", "baladiya", "all"], required=False, default="all"
    )
    limit = serializers.IntegerField(
        min_value=1, max_value=50, required=False, default=20
    )
