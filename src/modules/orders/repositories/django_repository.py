"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
``create`` runs in its own savepoint so a tracking-number collision
rolls back only the attempted insert, leaving the caller's transaction
(and its stock locks) usable for a retry.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from modules.orders.exceptions import IdempotencyKeyConflict, TrackingNumberConflict
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_RELATIONS = ("customer", "wilaya", "baladiya")
_PREFETCH = ("items__product", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        fields = dict(data)
        items = fields.pop("items", [])
        tracking_number = fields["tracking_number"]

        try:
            with transaction.atomic():
                order = Order.objects.create(**fields)
                total = Decimal("0.00")
                for item_data in items:
                    item = OrderItem(
                        order=order,
                        product_id=item_data["product_id"],
                        quantity=item_data["quantity"],
                        unit_price=item_data["unit_price"],
                    )
                    item.save()
                    total += item.subtotal
        except IntegrityError as exc:
            if self._is_idempotency_conflict(exc, fields.get("idempotency_key")):
                raise IdempotencyKeyConflict(fields["idempotency_key"]) from exc
            if self._is_tracking_conflict(exc, tracking_number):
                raise TrackingNumberConflict(tracking_number) from exc
            raise

        logger.debug(
            "order.persisted",
            order_id=str(order.id),
            item_count=len(items),
            total_amount=str(total),
        )
        return order

    @staticmethod
    def _is_idempotency_conflict(exc: IntegrityError, key: Optional[str]) -> bool:
        if not key:
            return False
        if "idempotency_key" in str(exc):
            return True
        return Order.objects.filter(idempotency_key=key).exists()

    @staticmethod
    def _is_tracking_conflict(exc: IntegrityError, tracking_number: str) -> bool:
        if "tracking_number" in str(exc):
            return True
        return Order.objects.filter(tracking_number=tracking_number).exists()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related(*_RELATIONS)
                .prefetch_related(*_PREFETCH)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """Orders with eager-loaded relations.

        Returns a lazy QuerySet so the API layer can apply its filter
        backends and pagination on top.
        """
        queryset = Order.objects.select_related(*_RELATIONS).prefetch_related("items")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: Any) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items so the caller can iterate over them while the
        row is locked.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_by_tracking_number(self, tracking_number: str) -> Optional[Order]:
        return (
            Order.objects.select_related("wilaya", "baladiya")
            .prefetch_related("items__product", "status_history")
            .filter(tracking_number=tracking_number.strip().upper())
            .first()
        )

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return (
            Order.objects.select_related(*_RELATIONS)
            .prefetch_related(*_PREFETCH)
            .filter(idempotency_key=key)
            .first()
        )

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        return entity

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: Any,
        new_status: str,
        old_status: Optional[str] = None,
        notes: str = "",
        changed_by: str = "system",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            notes=notes,
            changed_by=changed_by or "system",
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history
