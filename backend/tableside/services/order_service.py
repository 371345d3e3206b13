"""Order lifecycle: checkout, kitchen progress, payment.

Status only moves forward one step at a time::

    pending -> preparing -> ready -> served -> paid

``paid`` is terminal. Billing may jump straight to ``paid`` through
``mark_paid``; the step-by-step path is for the kitchen and floor staff.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from tableside.core.clock import utcnow
from tableside.core.exceptions import (
    AlreadyFinalizedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from tableside.core.sanitize import normalize_customer_id, sanitize_text
from tableside.models.restaurant import Order, OrderLine, OrderStatus, OrderType, PaymentMode
from tableside.services.loyalty_service import LoyaltyService, loyalty_points_for
from tableside.services.menu_service import MenuService
from tableside.services.table_service import TableService
from tableside.store.base import Store

logger = logging.getLogger(__name__)

FORWARD_TRANSITIONS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.SERVED,
    OrderStatus.SERVED: OrderStatus.PAID,
}

CENT = Decimal("0.01")


@dataclass
class OrderLineInput:
    """A cart line as submitted by the customer."""

    menu_item_id: int
    quantity: int = 1
    pack: bool = False


def compute_total(lines: Iterable[OrderLine]) -> Decimal:
    """Sum of unit price times quantity, in exact decimal."""
    total = sum((line.line_total for line in lines), Decimal("0"))
    return total.quantize(CENT)


class OrderService:
    def __init__(self, store: Store):
        self.store = store
        self.tables = TableService(store)
        self.menu = MenuService(store)

    # ===== CHECKOUT =====

    def create_order(
        self,
        table_number: int,
        lines: List[OrderLineInput],
        payment_mode: PaymentMode = PaymentMode.CASH,
        order_type: OrderType = OrderType.DINE_IN,
        scheduled_time: Optional[datetime] = None,
        customer_id: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> Order:
        """Place an order from a table.

        Prices are taken from the menu at this moment and never from the
        client. A dine-in order seats the table.
        """
        order_type = OrderType(order_type)
        if not lines:
            raise ValidationError("An order needs at least one line")
        if order_type == OrderType.ORDER_AHEAD and scheduled_time is None:
            raise ValidationError("Order-ahead orders need a scheduled time")

        table = self.tables.get_by_number(table_number)
        if order_type == OrderType.DINE_IN:
            self.tables.check_can_seat(table)

        order = Order(
            table_number=table.number,
            order_type=order_type,
            payment_mode=PaymentMode(payment_mode),
            scheduled_time=scheduled_time,
            customer_id=normalize_customer_id(customer_id) if customer_id and customer_id.strip() else None,
            customer_name=sanitize_text(customer_name),
            status=OrderStatus.PENDING,
        )
        for position, line in enumerate(lines):
            order.lines.append(self._price_line(line, position))

        order.total_amount = compute_total(order.lines)
        order.loyalty_points_earned = loyalty_points_for(order.total_amount)
        self.store.add(order)
        logger.info(
            f"Order {order.id} placed on table {order.table_number} "
            f"({order_type.value}, {len(order.lines)} lines, total {order.total_amount})"
        )

        if order_type == OrderType.DINE_IN:
            self.tables.seat_order(table, order.id)
        return order

    def _price_line(self, line: OrderLineInput, position: int) -> OrderLine:
        if line.quantity is None or line.quantity < 1:
            raise ValidationError(f"Quantity must be at least 1 (menu item {line.menu_item_id})")
        item = self.menu.get_item(line.menu_item_id)
        if not item.in_stock:
            raise ValidationError(f"'{item.name}' is out of stock")
        return OrderLine(
            position=position,
            menu_item_id=item.id,
            name=item.name,
            quantity=line.quantity,
            unit_price=Decimal(str(item.price)),
            pack=bool(line.pack),
        )

    # ===== LOOKUPS =====

    def get_order(self, order_id: int) -> Order:
        order = self.store.get(Order, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        table_number: Optional[int] = None,
    ) -> List[Order]:
        filters = {}
        if status is not None:
            filters["status"] = OrderStatus(status)
        if table_number is not None:
            filters["table_number"] = table_number
        return self.store.list(Order, **filters)

    def order_stats(self) -> dict:
        orders = self.store.list(Order)
        by_status = {s.value: 0 for s in OrderStatus}
        for order in orders:
            by_status[order.status.value] += 1
        revenue = sum(
            (Decimal(str(o.total_amount)) for o in orders if o.status == OrderStatus.PAID),
            Decimal("0"),
        )
        return {
            "total_orders": len(orders),
            "by_status": by_status,
            "open_orders": len(orders) - by_status[OrderStatus.PAID.value],
            "revenue": float(revenue.quantize(CENT)),
        }

    # ===== STATUS =====

    def transition_status(
        self,
        order_id: int,
        new_status: OrderStatus,
        expected_version: Optional[int] = None,
    ) -> Order:
        order = self.get_order(order_id)
        order.check_version(expected_version)
        new_status = OrderStatus(new_status)
        self._check_transition(order, new_status)
        return self._apply_status(order, new_status)

    def mark_paid(self, order_id: int) -> Order:
        """Close an order from any open status (payment taken at the counter)."""
        order = self.get_order(order_id)
        if order.status == OrderStatus.PAID:
            raise AlreadyFinalizedError("Order", order.id, OrderStatus.PAID.value)
        return self._finalize(order)

    def update_order(
        self,
        order_id: int,
        status: Optional[OrderStatus] = None,
        payment_mode: Optional[PaymentMode] = None,
        scheduled_time: Optional[datetime] = None,
        customer_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Order:
        """Partial update. Everything is validated before anything is changed."""
        order = self.get_order(order_id)
        order.check_version(expected_version)

        if order.status == OrderStatus.PAID:
            raise AlreadyFinalizedError("Order", order.id, OrderStatus.PAID.value)
        if status is not None:
            status = OrderStatus(status)
            if status != order.status:
                self._check_transition(order, status)
            else:
                status = None

        if payment_mode is not None:
            order.payment_mode = PaymentMode(payment_mode)
        if scheduled_time is not None:
            order.scheduled_time = scheduled_time
        if customer_id is not None:
            order.customer_id = normalize_customer_id(customer_id) if customer_id.strip() else None

        if status is None:
            self.store.save(order)
            logger.info(f"Order {order.id} fields updated")
            return order
        return self._apply_status(order, status)

    def _check_transition(self, order: Order, new_status: OrderStatus) -> None:
        if order.status == OrderStatus.PAID:
            logger.warning(f"Order {order.id} is paid; refusing move to {new_status.value}")
            raise AlreadyFinalizedError("Order", order.id, OrderStatus.PAID.value)
        if FORWARD_TRANSITIONS.get(order.status) != new_status:
            logger.warning(f"Order {order.id}: rejected {order.status.value} -> {new_status.value}")
            raise InvalidTransitionError("order", order.status.value, new_status.value)

    def _apply_status(self, order: Order, new_status: OrderStatus) -> Order:
        if new_status == OrderStatus.PAID:
            return self._finalize(order)
        previous = order.status
        order.status = new_status
        self.store.save(order)
        logger.info(f"Order {order.id}: {previous.value} -> {new_status.value}")
        return order

    def _finalize(self, order: Order) -> Order:
        """Move to paid, free the table it holds and award loyalty points once."""
        previous = order.status
        order.status = OrderStatus.PAID
        order.paid_at = utcnow()
        award = bool(order.customer_id) and not order.loyalty_points_awarded
        if award:
            order.loyalty_points_awarded = True
        self.store.save(order)
        logger.info(f"Order {order.id}: {previous.value} -> paid (total {order.total_amount})")

        self.tables.release_order(order.id)
        if award:
            LoyaltyService(self.store).award(order.customer_id, order.loyalty_points_earned)
        return order
