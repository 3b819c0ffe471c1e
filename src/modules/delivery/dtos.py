"""Delivery DTOs.

- ``QuoteRequestDTO``: input of a delivery-cost computation.
- ``DeliveryQuoteDTO``: the computed, never-persisted quote with its full
  itemisation.  It is snapshotted on the order as ``delivery_breakdown``.
- ``UpdateZoneDTO``: partial admin update of a delivery zone.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modules.delivery.constants import DeliveryType


class QuoteRequestDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    wilaya_id: int
    merchandise_total: Decimal = Field(ge=0)
    weight_kg: Optional[Decimal] = Field(default=None, gt=0)
    item_count: int = Field(default=0, ge=0)
    is_express: bool = False
    delivery_type: DeliveryType = DeliveryType.HOME


class DeliveryQuoteDTO(BaseModel):
    """Immutable delivery quote.

    ``subtotal`` is base + weight + item surcharges (before express).
    ``delivery_cost`` is the final, whole-dinar amount charged.
    """

    model_config = ConfigDict(frozen=True)

    wilaya_id: int
    wilaya_name: str
    wilaya_code: str
    delivery_type: DeliveryType
    is_express: bool
    base_cost: Decimal
    weight_surcharge: Decimal
    item_surcharge: Decimal
    express_surcharge: Decimal
    subtotal: Decimal
    free_delivery: bool
    free_delivery_threshold: Decimal
    is_remote_area: bool
    delivery_cost: Decimal
    estimated_days: int

    def breakdown(self) -> Dict[str, Any]:
        """JSON-safe snapshot stored on the order."""
        return self.model_dump(mode="json")


class UpdateZoneDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_delivery_cost: Optional[Decimal] = Field(default=None, ge=0)
    office_delivery_cost: Optional[Decimal] = Field(default=None, ge=0)
    estimated_days: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided.")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
