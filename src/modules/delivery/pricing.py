"""Delivery pricing engine.

``quote()`` is a pure function: given the destination zone's rates, the
order context and a ``PricingPolicy`` it returns a fully itemised
``DeliveryQuoteDTO``.  It never touches the database; ``DeliveryService``
resolves the zone and calls it.

Rules, in order:

1. ``base_cost`` is the zone's home cost for HOME, office cost for STOP_DESK.
2. Weight surcharge: ``(weight - allowance) * rate_per_kg`` above the
   allowance (1 kg), else 0.
3. Item surcharge: ``(units - threshold) * item_rate`` above 10 units, else 0.
4. ``subtotal = base + weight + item``.
5. Express surcharge: ``express_rate`` (0.5) applied to the base cost, or to
   the subtotal when the policy's ``express_basis`` is ``subtotal``.
6. Remote area: ``base_cost > remote_area_threshold`` (800).
7. Free delivery: ``merchandise_total >= free_threshold`` and not remote.
8. ``delivery_cost`` is 0 when free, else ``subtotal + express`` rounded
   half-up to a whole dinar.  Components are kept to the centime.
9. Express halves the transit days (floor, minimum 1).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.conf import settings

from modules.delivery.constants import DeliveryType, ExpressBasis
from modules.delivery.dtos import DeliveryQuoteDTO, QuoteRequestDTO
from modules.locations.exceptions import InvalidWilaya
from modules.locations.models import Wilaya

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
WHOLE_DINAR = Decimal("1")


@dataclass(frozen=True)
class PricingPolicy:
    free_delivery_threshold: Decimal = Decimal("5000")
    remote_area_threshold: Decimal = Decimal("800")
    weight_allowance_kg: Decimal = Decimal("1")
    weight_rate_per_kg: Decimal = Decimal("50")
    item_threshold: int = 10
    item_rate: Decimal = Decimal("25")
    express_rate: Decimal = Decimal("0.5")
    express_basis: str = ExpressBasis.BASE

    @classmethod
    def from_settings(cls) -> PricingPolicy:
        return cls(
            free_delivery_threshold=Decimal(settings.DELIVERY_FREE_THRESHOLD),
            remote_area_threshold=Decimal(settings.DELIVERY_REMOTE_AREA_THRESHOLD),
            weight_allowance_kg=Decimal(settings.DELIVERY_WEIGHT_ALLOWANCE_KG),
            weight_rate_per_kg=Decimal(settings.DELIVERY_WEIGHT_RATE_PER_KG),
            item_threshold=int(settings.DELIVERY_ITEM_THRESHOLD),
            item_rate=Decimal(settings.DELIVERY_ITEM_RATE),
            express_rate=Decimal(settings.DELIVERY_EXPRESS_RATE),
            express_basis=ExpressBasis(settings.DELIVERY_EXPRESS_SURCHARGE_BASIS),
        )


@dataclass(frozen=True)
class ZoneRates:
    """Resolved tariff of one wilaya's delivery zone."""

    wilaya_id: int
    wilaya_name: str
    wilaya_code: str
    home_cost: Decimal
    office_cost: Decimal
    estimated_days: int = 3

    @classmethod
    def from_zone(cls, zone) -> ZoneRates:
        return cls(
            wilaya_id=zone.wilaya.id,
            wilaya_name=zone.wilaya.name,
            wilaya_code=zone.wilaya.code,
            home_cost=zone.home_delivery_cost,
            office_cost=zone.office_delivery_cost,
            estimated_days=zone.estimated_days,
        )

    def base_cost(self, delivery_type: str) -> Decimal:
        if delivery_type == DeliveryType.STOP_DESK:
            return self.office_cost
        return self.home_cost


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def weight_surcharge(weight_kg: Optional[Decimal], policy: PricingPolicy) -> Decimal:
    if weight_kg is None or weight_kg <= policy.weight_allowance_kg:
        return ZERO
    return _money((weight_kg - policy.weight_allowance_kg) * policy.weight_rate_per_kg)


def item_surcharge(item_count: int, policy: PricingPolicy) -> Decimal:
    if item_count <= policy.item_threshold:
        return ZERO
    return _money(Decimal(item_count - policy.item_threshold) * policy.item_rate)


def express_surcharge(
    base_cost: Decimal, subtotal: Decimal, policy: PricingPolicy
) -> Decimal:
    basis = subtotal if policy.express_basis == ExpressBasis.SUBTOTAL else base_cost
    return _money(basis * policy.express_rate)


def estimated_days(days: int, is_express: bool) -> int:
    if is_express:
        return max(1, days // 2)
    return days


def quote(
    rates: ZoneRates, request: QuoteRequestDTO, policy: PricingPolicy
) -> DeliveryQuoteDTO:
    """Compute the delivery quote for an already-resolved zone.

    Raises:
        InvalidWilaya: ``request.wilaya_id`` is outside 1-58.
    """
    if not Wilaya.is_valid_id(request.wilaya_id):
        raise InvalidWilaya(
            f"Wilaya id must be between {Wilaya.MIN_ID} and {Wilaya.MAX_ID}.",
            attr="wilaya_id",
        )

    base = _money(rates.base_cost(request.delivery_type))
    weight = weight_surcharge(request.weight_kg, policy)
    items = item_surcharge(request.item_count, policy)
    subtotal = base + weight + items
    express = express_surcharge(base, subtotal, policy) if request.is_express else ZERO

    is_remote_area = base > policy.remote_area_threshold
    free_delivery = (
        request.merchandise_total >= policy.free_delivery_threshold
        and not is_remote_area
    )
    if free_delivery:
        delivery_cost = ZERO
    else:
        delivery_cost = _money(
            (subtotal + express).quantize(WHOLE_DINAR, rounding=ROUND_HALF_UP)
        )

    return DeliveryQuoteDTO(
        wilaya_id=rates.wilaya_id,
        wilaya_name=rates.wilaya_name,
        wilaya_code=rates.wilaya_code,
        delivery_type=request.delivery_type,
        is_express=request.is_express,
        base_cost=base,
        weight_surcharge=weight,
        item_surcharge=items,
        express_surcharge=express,
        subtotal=subtotal,
        free_delivery=free_delivery,
        free_delivery_threshold=policy.free_delivery_threshold,
        is_remote_area=is_remote_area,
        delivery_cost=delivery_cost,
        estimated_days=estimated_days(rates.estimated_days, request.is_express),
    )
