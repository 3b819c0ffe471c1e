"""Unit tests for DeliveryService.

Covers:
- Zone resolution errors (invalid id, unknown wilaya, inactive zone).
- Quotes priced from the zone row, not the reference data.
- Transit windows, zone listing and admin zone updates.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.delivery.dtos import QuoteRequestDTO, UpdateZoneDTO
from modules.delivery.exceptions import DeliveryZoneNotFound, NoActiveDeliveryZone
from modules.delivery.models import DeliveryZone
from modules.delivery.pricing import PricingPolicy
from modules.delivery.repositories import DeliveryZoneDjangoRepository
from modules.delivery.services import DeliveryService
from modules.locations.exceptions import InvalidWilaya, WilayaNotFound
from modules.locations.models import Wilaya
from modules.locations.repositories import LocationDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return DeliveryService(
        zone_repository=DeliveryZoneDjangoRepository(),
        location_repository=LocationDjangoRepository(),
    )


class TestZoneResolution:
    @pytest.mark.parametrize("wilaya_id", [0, 59])
    def test_invalid_id_rejected_before_lookup(self, wilaya_id):
        zone_repo = MagicMock()
        location_repo = MagicMock()
        service = DeliveryService(zone_repo, location_repo)

        with pytest.raises(InvalidWilaya):
            service.quote(QuoteRequestDTO(wilaya_id=wilaya_id, merchandise_total=Decimal("100")))

        location_repo.get_by_id.assert_not_called()
        zone_repo.get_active_for_wilaya.assert_not_called()

    def test_unknown_wilaya(self, service):
        with pytest.raises(WilayaNotFound):
            service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))

    def test_wilaya_without_zone(self, service):
        Wilaya.objects.create(id=16, name="الجزائر", name_latin="Alger", code="16")

        with pytest.raises(NoActiveDeliveryZone) as exc_info:
            service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))
        assert exc_info.value.code == "NO_ACTIVE_DELIVERY_ZONE"

    def test_inactive_zone(self, service, make_wilaya):
        make_wilaya(16, is_active=False)

        with pytest.raises(NoActiveDeliveryZone):
            service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))


class TestQuote:
    def test_uses_zone_row_costs(self, service, alger):
        DeliveryZone.objects.filter(wilaya=alger).update(home_delivery_cost=Decimal("650"))

        result = service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))

        assert result.base_cost == Decimal("650.00")
        assert result.delivery_cost == Decimal("650.00")
        assert result.wilaya_name == "الجزائر"
        assert result.wilaya_code == "16"

    def test_injected_policy_wins_over_settings(self, alger):
        service = DeliveryService(
            DeliveryZoneDjangoRepository(),
            LocationDjangoRepository(),
            policy=PricingPolicy(free_delivery_threshold=Decimal("100")),
        )

        result = service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))

        assert result.free_delivery is True

    def test_policy_follows_settings(self, service, alger, settings):
        settings.DELIVERY_FREE_THRESHOLD = Decimal("100")

        result = service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("150")))

        assert result.free_delivery is True


class TestEstimateWindow:
    def test_standard(self, service, make_wilaya):
        make_wilaya(16, estimated_days=3)
        assert service.estimate_window(16) == {"min": 3, "max": 4}

    def test_express(self, service, make_wilaya):
        make_wilaya(16, estimated_days=5)
        assert service.estimate_window(16, is_express=True) == {"min": 2, "max": 3}


class TestZones:
    def test_list_zones_only_active_in_wilaya_order(self, service, make_wilaya):
        make_wilaya(31)
        make_wilaya(16)
        make_wilaya(11, is_active=False)

        zones = service.list_zones()

        assert [zone.wilaya_id for zone in zones] == [16, 31]

    def test_update_zone(self, service, alger):
        zone = service.update_zone(
            16, UpdateZoneDTO(home_delivery_cost=Decimal("550"), estimated_days=2)
        )

        zone.refresh_from_db()
        assert zone.home_delivery_cost == Decimal("550.00")
        assert zone.office_delivery_cost == Decimal("300.00")
        assert zone.estimated_days == 2

    def test_deactivating_zone_blocks_quotes(self, service, alger):
        service.update_zone(16, UpdateZoneDTO(is_active=False))

        with pytest.raises(NoActiveDeliveryZone):
            service.quote(QuoteRequestDTO(wilaya_id=16, merchandise_total=Decimal("100")))

    def test_update_missing_zone(self, service):
        with pytest.raises(DeliveryZoneNotFound):
            service.update_zone(16, UpdateZoneDTO(is_active=True))

    def test_update_invalid_wilaya(self, service):
        with pytest.raises(InvalidWilaya):
            service.update_zone(60, UpdateZoneDTO(is_active=True))

    def test_update_dto_requires_a_field(self):
        with pytest.raises(ValueError):
            UpdateZoneDTO()
