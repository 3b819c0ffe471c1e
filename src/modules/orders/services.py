"""Order service layer (Use Cases).

Orchestrates order creation, status management and cancellation.  All
write operations are atomic: the service defines the unit-of-work
boundary, and any failure rolls back every write made so far.

Business rules enforced:
- Products must exist and be active; stock is verified under row locks
  and decremented with a conditional update, so stock never goes
  negative and concurrent orders cannot oversell.
- Prices are snapshotted on the items; the delivery cost always comes
  from ``DeliveryService.quote``.
- Customers are upserted by phone and never overwritten.
- Tracking-number collisions are retried a bounded number of times.
- Status transitions are validated against the state machine and
  recorded in the history; cancellation releases the reserved stock.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

import structlog
from django.conf import settings
from django.db import transaction

from modules.customers.models import mask_phone
from modules.delivery.dtos import QuoteRequestDTO
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    IdempotencyKeyConflict,
    InvalidOrderStatus,
    OrderNotFound,
    TrackingGenerationExhausted,
    TrackingNumberConflict,
)
from modules.orders.tracking import generate_tracking_number
from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.delivery.services import DeliveryService
    from modules.locations.services import LocationService
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and collaborating services via constructor
    injection (DIP).  ``tracking_generator`` and ``max_tracking_attempts``
    default to the module generator and ``ORDER_TRACKING_MAX_ATTEMPTS``.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
        location_service: LocationService,
        delivery_service: DeliveryService,
        tracking_generator: Callable[[], str] = generate_tracking_number,
        max_tracking_attempts: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository
        self._location_service = location_service
        self._delivery_service = delivery_service
        self._generate_tracking_number = tracking_generator
        self._max_tracking_attempts = max_tracking_attempts

    @property
    def max_tracking_attempts(self) -> int:
        return self._max_tracking_attempts or settings.ORDER_TRACKING_MAX_ATTEMPTS

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a new order with atomic stock reservation.

        Steps:
        0. Return the existing order if the idempotency key was seen.
        1. For each item (sorted by product PK to avoid deadlocks):
           lock the product row, check it is active and in stock.
        2. Snapshot prices and compute the merchandise total.
        3. Resolve the wilaya and check the baladiya belongs to it.
        4. Quote the delivery cost.
        5. Upsert the customer by phone.
        6. Persist order + items under a fresh tracking number, retrying
           on collision.
        7. Decrement stock with a conditional update.
        8. Record the initial status history.

        An order already stored under ``dto.idempotency_key`` is returned
        unchanged with ``is_replay`` set, including when a concurrent
        request stores it first.

        Raises:
            ProductNotFound: a product does not exist or is inactive.
            InsufficientStock: not enough stock, at check or decrement time.
            WilayaNotFound: the wilaya does not exist.
            InvalidBaladiya: the baladiya is unknown or in another wilaya.
            NoActiveDeliveryZone: the wilaya cannot be delivered to.
            TrackingGenerationExhausted: every tracking attempt collided.
        """
        log = logger.bind(wilaya_id=dto.wilaya_id, phone=mask_phone(dto.customer.phone))
        log.info("order.creation_started", item_count=len(dto.items))

        # 0. Idempotency check
        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                return _replayed(existing, log)

        # 1. + 2. Lock products, verify stock, snapshot prices
        products, repo_items, merchandise_total = self._reserve_items(dto)

        # 3. Destination
        wilaya, baladiya = self._location_service.resolve_address(
            dto.wilaya_id, dto.baladiya_id
        )

        # 4. Delivery cost (authoritative)
        delivery_quote = self._delivery_service.quote(
            QuoteRequestDTO(
                wilaya_id=wilaya.id,
                merchandise_total=merchandise_total,
                weight_kg=_total_weight(products, dto),
                item_count=dto.unit_count,
                is_express=dto.is_express,
                delivery_type=dto.delivery_type,
            )
        )

        # 5. Customer upsert
        customer, _ = self._customer_repo.upsert_by_phone(
            dto.customer,
            wilaya_id=wilaya.id,
            baladiya_id=baladiya.id,
            address=dto.delivery_address,
        )

        # 6. Persist order + items
        try:
            order = self._persist_with_tracking_number(
                {
                    "customer_id": customer.id,
                    "wilaya_id": wilaya.id,
                    "baladiya_id": baladiya.id,
                    "delivery_address": dto.delivery_address,
                    "delivery_type": dto.delivery_type,
                    "is_express": dto.is_express,
                    "payment_method": dto.payment_method,
                    "status": OrderStatus.PENDING,
                    "total_amount": merchandise_total,
                    "delivery_cost": delivery_quote.delivery_cost,
                    "delivery_breakdown": delivery_quote.breakdown(),
                    "estimated_days": delivery_quote.estimated_days,
                    "notes": dto.notes or "",
                    "idempotency_key": dto.idempotency_key,
                    "items": repo_items,
                }
            )
        except IdempotencyKeyConflict:
            # A concurrent request with the same key committed first.
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing is None:
                raise
            return _replayed(existing, log)
        log = log.bind(order_id=str(order.id), tracking_number=order.tracking_number)

        # 7. Conditional stock decrement
        for item in repo_items:
            if not self._product_repo.decrement_stock(item["product_id"], item["quantity"]):
                log.warning("order.stock_race_lost", product_id=str(item["product_id"]))
                raise InsufficientStock(
                    f"Product {item['product_id']}: stock changed while ordering.",
                    attr="items",
                )
            log.info(
                "order.stock_reserved",
                product_id=str(item["product_id"]),
                quantity=item["quantity"],
            )

        # 8. Initial history
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.PENDING,
            notes="Order created",
        )

        log.info(
            "order.created",
            total_amount=str(merchandise_total),
            delivery_cost=str(delivery_quote.delivery_cost),
        )
        return self._order_repo.get_by_id(order.id) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: Any,
        new_status: str,
        notes: str = "",
        changed_by: str = "system",
    ) -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock on the order before validating the
        transition.  Cancelling through here releases stock as
        ``cancel_order`` does.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        if new_status == OrderStatus.CANCELLED:
            return self.cancel_order(order_id, notes=notes, changed_by=changed_by)

        order = self._locked_order(order_id)
        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=new_status,
        )
        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        old_status = order.status
        order.status = new_status
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            new_status=new_status,
            old_status=old_status,
            notes=notes,
            changed_by=changed_by,
        )
        log.info("order.status_updated")
        return self._order_repo.get_by_id(order.id)

    @transaction.atomic
    def cancel_order(
        self, order_id: Any, notes: str = "", changed_by: str = "system"
    ) -> Order:
        """Cancel an order and release its reserved stock.

        The order row is locked first so concurrent cancellations cannot
        release stock twice.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is already delivered or cancelled.
        """
        order = self._locked_order(order_id)
        log = logger.bind(order_id=str(order_id), current_status=order.status)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")

        for item in sorted(order.items.all(), key=lambda i: str(i.product_id)):
            self._product_repo.release_stock(item.product_id, item.quantity)

        old_status = order.status
        order.status = OrderStatus.CANCELLED
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.CANCELLED,
            old_status=old_status,
            notes=notes or "Order cancelled",
            changed_by=changed_by,
        )
        log.info("order.cancelled")
        return self._order_repo.get_by_id(order.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_by_tracking_number(self, tracking_number: str) -> Order:
        order = self._order_repo.get_by_tracking_number(tracking_number)
        if not order:
            raise OrderNotFound(f"No order with tracking number {tracking_number}.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """Return orders, optionally filtered (newest first)."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reserve_items(
        self, dto: CreateOrderDTO
    ) -> Tuple[List[Product], List[Dict[str, Any]], Decimal]:
        products: List[Product] = []
        repo_items: List[Dict[str, Any]] = []
        total = Decimal("0.00")

        for item_dto in sorted(dto.items, key=lambda i: str(i.product_id)):
            product = self._product_repo.get_for_update(item_dto.product_id)
            if not product or not product.is_active:
                raise ProductNotFound(
                    f"Product {item_dto.product_id} not found.", attr="items"
                )
            if product.stock_quantity < item_dto.quantity:
                raise InsufficientStock(
                    f"Product {product.name}: requested {item_dto.quantity}, "
                    f"available {product.stock_quantity}.",
                    attr="items",
                )
            products.append(product)
            repo_items.append(
                {
                    "product_id": product.id,
                    "quantity": item_dto.quantity,
                    "unit_price": product.price,
                }
            )
            total += product.price * item_dto.quantity

        return products, repo_items, total

    def _persist_with_tracking_number(self, data: Dict[str, Any]) -> Order:
        attempts = self.max_tracking_attempts
        for attempt in range(1, attempts + 1):
            tracking_number = self._generate_tracking_number()
            try:
                return self._order_repo.create({**data, "tracking_number": tracking_number})
            except TrackingNumberConflict:
                logger.warning(
                    "order.tracking_collision",
                    tracking_number=tracking_number,
                    attempt=attempt,
                )
        logger.error("order.tracking_exhausted", attempts=attempts)
        raise TrackingGenerationExhausted(
            f"Could not allocate a tracking number after {attempts} attempts."
        )

    def _locked_order(self, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order


def _total_weight(products: List[Product], dto: CreateOrderDTO) -> Optional[Decimal]:
    """Summed shipping weight, or ``None`` when no product carries one."""
    quantities = {item.product_id: item.quantity for item in dto.items}
    weighed = [p for p in products if p.weight_kg is not None]
    if not weighed:
        return None
    return sum((p.weight_kg * quantities[p.id] for p in weighed), Decimal("0"))


def _replayed(order: Order, log: Any) -> Order:
    """Mark ``order`` as returned for an already-used idempotency key."""
    log.info("order.idempotency_hit", order_id=str(order.id))
    order.is_replay = True
    return order
