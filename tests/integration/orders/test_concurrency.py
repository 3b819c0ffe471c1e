"""Stock concurrency integration test.

Proves that the locked read plus the conditional ``UPDATE ... WHERE
stock_quantity >= quantity`` in ``OrderService.create_order`` serialise
concurrent stock reservations.

Scenarios:
- Stock 5, ten threads buying 1 unit: exactly 5 succeed, stock ends at 0.
- Stock 5, two threads buying 3 units: exactly one succeeds, stock ends at 2.

Uses ``TransactionTestCase`` so each thread sees committed data and gets
its own database connection.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import django
from django.test import TransactionTestCase

from modules.customers.dtos import CustomerInfoDTO
from modules.delivery.models import DeliveryZone
from modules.locations.models import Baladiya, Wilaya
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order
from modules.orders.views import build_order_service
from modules.products.exceptions import InsufficientStock
from modules.products.models import Product, ProductStatus

logger = logging.getLogger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10


class TestStockConcurrency(TransactionTestCase):
    """Prove atomic stock reservation under concurrent load."""

    def setUp(self):
        wilaya = Wilaya.objects.create(id=16, name="الجزائر", name_latin="Alger", code="16")
        DeliveryZone.objects.create(
            wilaya=wilaya,
            home_delivery_cost=Decimal("500"),
            office_delivery_cost=Decimal("300"),
        )
        self.baladiya = Baladiya.objects.create(
            id=1601, name="الجزائر الوسطى", name_latin="Alger Centre", postal_code="16001", wilaya=wilaya
        )
        self.product = Product.objects.create(
            name="Kaftan",
            price=Decimal("2500.00"),
            stock_quantity=INITIAL_STOCK,
            status=ProductStatus.ACTIVE,
        )

    def _create_order_in_thread(self, thread_id: int, quantity: int) -> str:
        """Attempt to create an order. Returns 'success' or 'insufficient'."""
        django.db.connections.close_all()
        try:
            dto = CreateOrderDTO(
                customer=CustomerInfoDTO(
                    name=f"Client {thread_id}", phone=f"05550000{thread_id:02d}"
                ),
                wilaya_id=16,
                baladiya_id=self.baladiya.id,
                delivery_address="Rue 1",
                items=[CreateOrderItemDTO(product_id=self.product.id, quantity=quantity)],
                notes=f"Concurrency thread {thread_id}",
            )
            try:
                build_order_service().create_order(dto)
                logger.warning("Thread %d: order created successfully", thread_id)
                return "success"
            except InsufficientStock:
                logger.warning("Thread %d: InsufficientStock (expected)", thread_id)
                return "insufficient"
        finally:
            django.db.connections.close_all()

    def _run(self, workers: int, quantity: int) -> list[str]:
        results = []
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self._create_order_in_thread, i, quantity): i
                for i in range(workers)
            }
            for future in as_completed(futures):
                results.append(future.result())
        return results

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=5: exactly 5 succeed."""
        results = self._run(NUM_WORKERS, quantity=1)

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), NUM_WORKERS - INITIAL_STOCK)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_two_large_orders_only_one_wins(self):
        """2 threads buy 3 units from stock=5: exactly one succeeds."""
        results = self._run(2, quantity=3)

        self.assertEqual(results.count("success"), 1)
        self.assertEqual(results.count("insufficient"), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 2)

    def test_stock_conservation(self):
        """Initial stock = units sold + units remaining, never negative."""
        results = self._run(NUM_WORKERS, quantity=2)

        self.product.refresh_from_db()
        sold = results.count("success") * 2
        self.assertGreaterEqual(self.product.stock_quantity, 0)
        self.assertEqual(INITIAL_STOCK, sold + self.product.stock_quantity)
