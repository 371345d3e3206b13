"""Tests for the order lifecycle: checkout, status transitions, payment."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from tableside.core.exceptions import (
    AlreadyFinalizedError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    TableNotAvailableError,
    ValidationError,
)
from tableside.models import LoyaltyAccount, Order, OrderStatus, OrderType, PaymentMode, TableStatus
from tableside.services import LoyaltyService, MenuService, OrderLineInput, OrderService, TableService
from tableside.services.order_service import FORWARD_TRANSITIONS


@pytest.fixture
def service(store):
    return OrderService(store)


def _lines(menu, curry=2, lassi=1):
    return [
        OrderLineInput(menu["curry"].id, quantity=curry),
        OrderLineInput(menu["lassi"].id, quantity=lassi, pack=True),
    ]


def _walk_to(service, order, target):
    status = order.status
    while status != target:
        status = FORWARD_TRANSITIONS[status]
        service.transition_status(order.id, status)


class TestCreateOrder:
    def test_total_is_computed_from_menu_prices(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        assert order.total_amount == Decimal("250.00")
        assert order.loyalty_points_earned == 25
        assert order.status == OrderStatus.PENDING
        assert [line.name for line in order.lines] == ["Paneer Curry", "Sweet Lassi"]
        assert order.lines[1].pack is True

    def test_dine_in_occupies_table(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu))
        table = TableService(store).get_by_number(5)
        assert table.status == TableStatus.OCCUPIED
        assert table.current_order_id == order.id

    def test_second_dine_in_order_takes_over_table(self, service, menu, tables, store):
        first = service.create_order(5, _lines(menu))
        second = service.create_order(5, _lines(menu, curry=1))
        table = TableService(store).get_by_number(5)
        assert table.current_order_id == second.id

        # Paying the earlier order must not free the table
        service.mark_paid(first.id)
        assert table.status == TableStatus.OCCUPIED

    def test_takeout_leaves_table_alone(self, service, menu, tables, store):
        service.create_order(3, _lines(menu), order_type=OrderType.TAKEOUT)
        assert TableService(store).get_by_number(3).status == TableStatus.AVAILABLE

    def test_order_ahead_requires_scheduled_time(self, service, menu, tables):
        with pytest.raises(ValidationError):
            service.create_order(3, _lines(menu), order_type=OrderType.ORDER_AHEAD)

        pickup = datetime.now(timezone.utc) + timedelta(hours=1)
        order = service.create_order(3, _lines(menu), order_type=OrderType.ORDER_AHEAD, scheduled_time=pickup)
        assert order.order_type == OrderType.ORDER_AHEAD
        assert order.scheduled_time is not None

    def test_price_snapshot_is_immutable(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu))
        MenuService(store).update_item(menu["curry"].id, {"price": Decimal("180.00")})
        reloaded = service.get_order(order.id)
        assert reloaded.lines[0].unit_price == Decimal("100.00")
        assert reloaded.total_amount == Decimal("250.00")

    def test_empty_order_rejected(self, service, tables):
        with pytest.raises(ValidationError):
            service.create_order(5, [])

    def test_zero_quantity_rejected(self, service, menu, tables, store):
        with pytest.raises(ValidationError):
            service.create_order(5, _lines(menu, curry=0))
        assert store.list(Order) == []
        assert TableService(store).get_by_number(5).status == TableStatus.AVAILABLE

    def test_unknown_table(self, service, menu, tables):
        with pytest.raises(NotFoundError):
            service.create_order(99, _lines(menu))

    def test_unknown_menu_item(self, service, tables):
        with pytest.raises(NotFoundError):
            service.create_order(5, [OrderLineInput(404)])

    def test_out_of_stock_item_rejected(self, service, menu, tables):
        with pytest.raises(ValidationError):
            service.create_order(5, [OrderLineInput(menu["special"].id)])

    def test_maintenance_table_rejected(self, service, menu, tables, store):
        TableService(store).set_maintenance(tables[5].id)
        with pytest.raises(TableNotAvailableError):
            service.create_order(5, _lines(menu))
        assert store.list(Order) == []

    def test_customer_id_is_normalised(self, service, menu, tables):
        order = service.create_order(5, _lines(menu), customer_id=" 98765-43210 ")
        assert order.customer_id == "9876543210"

    def test_fractional_prices_sum_exactly(self, service, tables, store):
        item = MenuService(store).create_item(name="Chai", price=Decimal("0.10"), category="beverages")
        order = service.create_order(3, [OrderLineInput(item.id, quantity=3)])
        assert order.total_amount == Decimal("0.30")
        assert order.loyalty_points_earned == 0


class TestStatusTransitions:
    def test_full_forward_path_frees_table(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu))
        _walk_to(service, order, OrderStatus.PAID)
        assert service.get_order(order.id).status == OrderStatus.PAID
        assert service.get_order(order.id).paid_at is not None
        assert TableService(store).get_by_number(5).status == TableStatus.AVAILABLE

    def test_skip_is_rejected(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        with pytest.raises(InvalidTransitionError):
            service.transition_status(order.id, OrderStatus.PAID)
        assert service.get_order(order.id).status == OrderStatus.PENDING

    def test_backward_is_rejected(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        _walk_to(service, order, OrderStatus.READY)
        with pytest.raises(InvalidTransitionError):
            service.transition_status(order.id, OrderStatus.PREPARING)
        assert service.get_order(order.id).status == OrderStatus.READY

    def test_same_status_is_rejected(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        with pytest.raises(InvalidTransitionError):
            service.transition_status(order.id, OrderStatus.PENDING)

    def test_paid_is_final(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        service.mark_paid(order.id)
        with pytest.raises(AlreadyFinalizedError):
            service.transition_status(order.id, OrderStatus.SERVED)
        with pytest.raises(AlreadyFinalizedError):
            service.mark_paid(order.id)

    def test_unknown_order(self, service):
        with pytest.raises(NotFoundError):
            service.transition_status(77, OrderStatus.PREPARING)

    def test_stale_version(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        version = order.version
        service.transition_status(order.id, OrderStatus.PREPARING, expected_version=version)
        with pytest.raises(ConflictError):
            service.transition_status(order.id, OrderStatus.READY, expected_version=version)
        assert service.get_order(order.id).status == OrderStatus.PREPARING


class TestPaymentAndLoyalty:
    def test_mark_paid_from_any_open_status(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu))
        service.transition_status(order.id, OrderStatus.PREPARING)
        service.mark_paid(order.id)
        assert service.get_order(order.id).status == OrderStatus.PAID
        assert TableService(store).get_by_number(5).status == TableStatus.AVAILABLE

    def test_points_awarded_on_paid_not_at_creation(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu), customer_id="guest@example.com")
        assert store.find_one(LoyaltyAccount, customer_id="guest@example.com") is None

        service.mark_paid(order.id)
        account = LoyaltyService(store).get_account("guest@example.com")
        assert account.points == 25

    def test_no_points_without_customer(self, service, menu, tables, store):
        order = service.create_order(5, _lines(menu))
        service.mark_paid(order.id)
        assert store.list(LoyaltyAccount) == []


class TestUpdateOrder:
    def test_edit_payment_mode(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        updated = service.update_order(order.id, payment_mode=PaymentMode.UPI)
        assert updated.payment_mode == PaymentMode.UPI
        assert updated.status == OrderStatus.PENDING

    def test_status_and_fields_together(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        updated = service.update_order(order.id, status=OrderStatus.PREPARING, customer_id="A@B.com")
        assert updated.status == OrderStatus.PREPARING
        assert updated.customer_id == "a@b.com"

    def test_invalid_status_leaves_fields_untouched(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        with pytest.raises(InvalidTransitionError):
            service.update_order(order.id, status=OrderStatus.SERVED, payment_mode=PaymentMode.UPI)
        reloaded = service.get_order(order.id)
        assert reloaded.payment_mode == PaymentMode.CASH
        assert reloaded.status == OrderStatus.PENDING

    def test_paid_order_cannot_be_edited(self, service, menu, tables):
        order = service.create_order(5, _lines(menu))
        service.mark_paid(order.id)
        with pytest.raises(AlreadyFinalizedError):
            service.update_order(order.id, payment_mode=PaymentMode.UPI)


class TestOrderStats:
    def test_counts_and_revenue(self, service, menu, tables):
        paid = service.create_order(5, _lines(menu))
        service.create_order(3, _lines(menu, curry=1))
        service.mark_paid(paid.id)

        stats = service.order_stats()
        assert stats["total_orders"] == 2
        assert stats["by_status"]["paid"] == 1
        assert stats["by_status"]["pending"] == 1
        assert stats["open_orders"] == 1
        assert stats["revenue"] == 250.0
