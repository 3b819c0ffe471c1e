"""Unit tests for OrderDjangoRepository."""

from decimal import Decimal

import pytest

from modules.customers.models import Customer
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import IdempotencyKeyConflict, TrackingNumberConflict
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order_data(alger_centre, make_product):
    customer = Customer.objects.create(name="Amina", phone="0555123456")
    product = make_product(price="1200.00")

    def _data(tracking_number, **overrides):
        data = {
            "tracking_number": tracking_number,
            "customer_id": customer.id,
            "wilaya_id": 16,
            "baladiya_id": alger_centre.id,
            "delivery_address": "Rue 1",
            "total_amount": Decimal("2400.00"),
            "delivery_cost": Decimal("500.00"),
            "delivery_breakdown": {},
            "items": [
                {"product_id": product.id, "quantity": 2, "unit_price": product.price}
            ],
        }
        data.update(overrides)
        return data

    return _data


class TestCreate:
    def test_creates_order_with_items(self, repo, order_data):
        order = repo.create(order_data("SY00000001001"))

        assert order.status == OrderStatus.PENDING
        item = order.items.get()
        assert item.subtotal == Decimal("2400.00")

    def test_duplicate_tracking_number_is_a_conflict(self, repo, order_data):
        repo.create(order_data("SY00000001001"))

        with pytest.raises(TrackingNumberConflict):
            repo.create(order_data("SY00000001001"))

        # the savepoint keeps the outer transaction usable
        assert Order.objects.count() == 1
        repo.create(order_data("SY00000001002"))
        assert Order.objects.count() == 2

    def test_duplicate_idempotency_key_raises_conflict(self, repo, order_data):
        repo.create(order_data("SY00000001001", idempotency_key="same"))

        with pytest.raises(IdempotencyKeyConflict):
            repo.create(order_data("SY00000001002", idempotency_key="same"))

        assert Order.objects.count() == 1


class TestRead:
    def test_get_by_id_invalid_uuid(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_tracking_lookup_is_case_insensitive(self, repo, order_data):
        order = repo.create(order_data("SY00000001001"))

        assert repo.get_by_tracking_number(" sy00000001001 ").id == order.id
        assert repo.get_by_tracking_number("SY99999999999") is None

    def test_get_by_idempotency_key(self, repo, order_data):
        order = repo.create(order_data("SY00000001001", idempotency_key="abc"))

        assert repo.get_by_idempotency_key("abc").id == order.id
        assert repo.get_by_idempotency_key("other") is None

    def test_list_applies_filters(self, repo, order_data):
        repo.create(order_data("SY00000001001"))
        confirmed = repo.create(
            order_data("SY00000001002", status=OrderStatus.CONFIRMED)
        )

        result = list(repo.list({"status": OrderStatus.CONFIRMED}))

        assert [o.id for o in result] == [confirmed.id]


class TestHistory:
    def test_add_history(self, repo, order_data):
        order = repo.create(order_data("SY00000001001"))

        repo.add_history(order.id, OrderStatus.CONFIRMED, old_status=OrderStatus.PENDING)

        history = OrderStatusHistory.objects.get(order=order)
        assert history.old_status == OrderStatus.PENDING
        assert history.new_status == OrderStatus.CONFIRMED
        assert history.changed_by == "system"

    def test_blank_actor_falls_back_to_system(self, repo, order_data):
        order = repo.create(order_data("SY00000001001"))

        history = repo.add_history(order.id, OrderStatus.CONFIRMED, changed_by="")

        assert history.changed_by == "system"
