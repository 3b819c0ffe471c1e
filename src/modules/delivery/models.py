"""Delivery zone: the per-wilaya delivery tariff.

A zone is the only place delivery costs are stored.  Each wilaya has at
most one zone; a wilaya without an active zone cannot be delivered to.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class DeliveryZone(BaseModel):
    wilaya = models.OneToOneField(
        "locations.Wilaya",
        on_delete=models.PROTECT,
        related_name="delivery_zone",
    )
    home_delivery_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    office_delivery_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    estimated_days = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1)],
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "delivery_zones"
        ordering = ["wilaya_id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(home_delivery_cost__gte=0)
                & models.Q(office_delivery_cost__gte=0),
                name="delivery_zones_costs_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(estimated_days__gte=1),
                name="delivery_zones_days_positive",
            ),
        ]

    @property
    def base_cost(self) -> Decimal:
        """Home delivery cost, kept for clients that only know one tariff."""
        return self.home_delivery_cost

    def __str__(self) -> str:
        return f"Zone {self.wilaya_id} ({self.home_delivery_cost}/{self.office_delivery_cost} DA)"
