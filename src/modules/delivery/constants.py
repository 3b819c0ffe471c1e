"""Delivery domain constants."""

from django.db import models


class DeliveryType(models.TextChoices):
    HOME = "HOME", "Home delivery"
    STOP_DESK = "STOP_DESK", "Stop-desk pickup"


class ExpressBasis(models.TextChoices):
    """What the express multiplier is applied to."""

    BASE = "base", "Base cost only"
    SUBTOTAL = "subtotal", "Base cost plus weight and item surcharges"
