from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.delivery.models import DeliveryZone
from modules.locations.data import WILAYAS_BY_ID
from modules.locations.models import Baladiya, Wilaya
from modules.products.models import Product, ProductStatus


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def admin_client():
    """APIClient force-authenticated as a staff user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="dispatcher", password="testpass123", is_staff=True
    )
    client.force_authenticate(user=user)
    return client


# ---------------------------------------------------------------------------
# Location catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_wilaya():
    """Create a wilaya and its active delivery zone from the reference data."""

    def _make(wilaya_id: int, is_active: bool = True, estimated_days: int = 3) -> Wilaya:
        seed = WILAYAS_BY_ID[wilaya_id]
        wilaya = Wilaya.objects.create(
            id=seed.id, name=seed.name, name_latin=seed.name_latin, code=seed.code
        )
        DeliveryZone.objects.create(
            wilaya=wilaya,
            home_delivery_cost=seed.home_delivery_cost,
            office_delivery_cost=seed.office_delivery_cost,
            estimated_days=estimated_days,
            is_active=is_active,
        )
        return wilaya

    return _make


@pytest.fixture()
def alger(make_wilaya):
    """Wilaya 16: home 500 DA, stop-desk 300 DA."""
    return make_wilaya(16)


@pytest.fixture()
def tamanrasset(make_wilaya):
    """Wilaya 11: home 1200 DA, a remote area."""
    return make_wilaya(11)


@pytest.fixture()
def alger_centre(alger):
    return Baladiya.objects.create(
        id=1601, name="الجزائر الوسطى", name_latin="Alger Centre", postal_code="16001", wilaya=alger
    )


@pytest.fixture()
def tamanrasset_commune(tamanrasset):
    return Baladiya.objects.create(
        id=1101, name="تمنراست", name_latin="Tamanrasset", postal_code="11001", wilaya=tamanrasset
    )


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_product():
    def _make(
        name: str = "Kaftan",
        price: str = "2500.00",
        stock: int = 10,
        weight_kg: str | None = None,
        status: str = ProductStatus.ACTIVE,
    ) -> Product:
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            weight_kg=Decimal(weight_kg) if weight_kg is not None else None,
            status=status,
        )

    return _make


@pytest.fixture()
def order_payload(alger_centre):
    """Build a valid checkout payload for Alger Centre."""

    def _payload(*items, **overrides):
        payload = {
            "customer_name": "Amina Benali",
            "customer_phone": "0555 12 34 56",
            "customer_email": "amina@example.dz",
            "wilaya_id": 16,
            "baladiya_id": alger_centre.id,
            "delivery_address": "12 rue Didouche Mourad",
            "items": [
                {"product_id": str(product.id), "quantity": quantity}
                for product, quantity in items
            ],
            "payment_method": "CASH_ON_DELIVERY",
        }
        payload.update(overrides)
        return payload

    return _payload
