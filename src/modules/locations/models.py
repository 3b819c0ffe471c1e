"""Location catalog: the 58 wilayas and their baladiyas.

Reference data keeps its official integer codes as primary keys; the
catalog is seeded once (``manage.py seed_locations``) and read-only at
runtime.
"""

from __future__ import annotations

from django.db import models


class Wilaya(models.Model):
    """Algerian province, identified by its official number (1-58)."""

    MIN_ID = 1
    MAX_ID = 58

    id = models.PositiveSmallIntegerField(primary_key=True)
    name = models.CharField(max_length=100)
    name_latin = models.CharField(max_length=100, blank=True, default="")
    code = models.CharField(max_length=2, unique=True)

    class Meta:
        db_table = "wilayas"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(id__gte=1) & models.Q(id__lte=58),
                name="wilayas_id_range",
            ),
        ]

    @classmethod
    def is_valid_id(cls, wilaya_id: int) -> bool:
        return cls.MIN_ID <= wilaya_id <= cls.MAX_ID

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"


class Baladiya(models.Model):
    """Commune belonging to exactly one wilaya."""

    id = models.PositiveIntegerField(primary_key=True)
    name = models.CharField(max_length=150)
    name_latin = models.CharField(max_length=150, blank=True, default="")
    postal_code = models.CharField(max_length=8, blank=True, default="")
    wilaya = models.ForeignKey(
        "locations.Wilaya",
        on_delete=models.PROTECT,
        related_name="baladiyas",
    )

    class Meta:
        db_table = "baladiyas"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["wilaya", "name"], name="baladiyas_wilaya_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name
