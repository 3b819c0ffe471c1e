"""Customer model keyed by phone number.

Business rules implemented:
- The phone number is the natural key: normalised on save and unique.
- Customers are created as a side effect of a first order and never
  overwritten by later orders (enforced by the repository upsert).
- The phone number is masked in ``__str__`` and never logged in clear.
"""

from __future__ import annotations

import re

from django.db import models

from modules.core.models import BaseModel

_PHONE_SEPARATORS = re.compile(r"[\s.\-()]")


def normalize_phone(value: str) -> str:
    """Strip whitespace, dots, dashes and parentheses from a phone number."""
    return _PHONE_SEPARATORS.sub("", value or "")


def mask_phone(value: str) -> str:
    return f"***{value[-4:]}" if value else "????"


class Customer(BaseModel):
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, unique=True)
    email = models.EmailField(max_length=254, blank=True, default="")
    wilaya = models.ForeignKey(
        "locations.Wilaya",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )
    baladiya = models.ForeignKey(
        "locations.Baladiya",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )
    address = models.TextField(blank=True, default="")

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        if self.phone:
            self.phone = normalize_phone(self.phone)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({mask_phone(self.phone)})"
