"""Tests for the table state machine."""

import pytest
from decimal import Decimal

from tableside.core.exceptions import (
    AlreadyFinalizedError,
    ConflictError,
    DuplicateTableNumberError,
    InvalidTransitionError,
    NotFoundError,
    TableNotAvailableError,
    TableOccupiedError,
    ValidationError,
)
from tableside.models import Order, OrderStatus, Table, TableStatus
from tableside.services import OrderLineInput, OrderService, TableService


@pytest.fixture
def service(store):
    return TableService(store)


def _open_order(store, table_number):
    return store.add(Order(table_number=table_number, status=OrderStatus.PENDING, total_amount=Decimal("100")))


class TestAddTable:
    def test_new_table_is_available(self, service):
        table = service.add_table(5, seats=4)
        assert table.status == TableStatus.AVAILABLE
        assert table.current_order_id is None

    def test_duplicate_number_rejected_and_count_unchanged(self, service, store):
        service.add_table(5, seats=4)
        with pytest.raises(DuplicateTableNumberError):
            service.add_table(5, seats=2)
        assert len(store.list(Table)) == 1

    def test_can_start_in_maintenance(self, service):
        assert service.add_table(8, seats=2, status=TableStatus.MAINTENANCE).status == TableStatus.MAINTENANCE

    def test_cannot_start_occupied(self, service):
        with pytest.raises(ValidationError):
            service.add_table(8, seats=2, status=TableStatus.OCCUPIED)

    def test_seats_out_of_range(self, service):
        with pytest.raises(ValidationError):
            service.add_table(8, seats=25)

    def test_lookup_by_number(self, service):
        table = service.add_table(12, seats=6)
        assert service.get_by_number(12).id == table.id
        with pytest.raises(NotFoundError):
            service.get_by_number(13)

    def test_list_sorted_by_number(self, service):
        for number in (9, 1, 4):
            service.add_table(number, seats=4)
        assert [t.number for t in service.list_tables()] == [1, 4, 9]


class TestReservationCycle:
    def test_reserve_then_free(self, service):
        table = service.add_table(1, seats=4)
        service.reserve(table.id, "Asha", until="19:30")
        assert table.status == TableStatus.RESERVED
        assert table.reserved_by == "Asha"
        assert table.reserved_until == "19:30"

        service.free(table.id)
        assert table.status == TableStatus.AVAILABLE
        assert table.reserved_by is None
        assert table.reserved_until is None

    def test_reserve_only_from_available(self, service):
        table = service.add_table(1, seats=4)
        service.occupy(table.id)
        with pytest.raises(TableNotAvailableError):
            service.reserve(table.id, "Asha")
        assert table.status == TableStatus.OCCUPIED

    def test_reservation_fulfilled_by_occupying(self, service, store):
        table = service.add_table(1, seats=4)
        order = _open_order(store, 1)
        service.reserve(table.id, "Asha")
        service.occupy(table.id, order_id=order.id)
        assert table.status == TableStatus.OCCUPIED
        assert table.current_order_id == order.id
        assert table.reserved_by is None

    def test_reserve_needs_a_name(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(ValidationError):
            service.reserve(table.id, "  ")
        assert table.status == TableStatus.AVAILABLE


class TestOrderCycle:
    def test_occupy_and_free(self, service, store):
        table = service.add_table(1, seats=4)
        service.occupy(table.id, order_id=_open_order(store, 1).id)
        assert table.status == TableStatus.OCCUPIED
        service.free(table.id)
        assert table.status == TableStatus.AVAILABLE
        assert table.current_order_id is None

    def test_free_available_table_is_invalid(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(InvalidTransitionError):
            service.free(table.id)

    def test_release_only_for_current_order(self, service, store):
        table = service.add_table(1, seats=4)
        earlier, current = _open_order(store, 1), _open_order(store, 1)
        service.occupy(table.id, order_id=current.id)
        assert service.release_order(earlier.id) is None
        assert table.status == TableStatus.OCCUPIED
        service.release_order(current.id)
        assert table.status == TableStatus.AVAILABLE

    def test_occupy_with_unknown_order(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(NotFoundError):
            service.occupy(table.id, order_id=404)
        assert table.status == TableStatus.AVAILABLE

    def test_occupy_with_order_from_another_table(self, service, store):
        table = service.add_table(1, seats=4)
        service.add_table(2, seats=4)
        with pytest.raises(ValidationError):
            service.occupy(table.id, order_id=_open_order(store, 2).id)
        assert table.current_order_id is None

    def test_occupy_with_paid_order(self, service, store):
        table = service.add_table(1, seats=4)
        order = _open_order(store, 1)
        order.status = OrderStatus.PAID
        store.save(order)
        with pytest.raises(AlreadyFinalizedError):
            service.occupy(table.id, order_id=order.id)

    def test_update_with_unknown_current_order(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(NotFoundError):
            service.update_table(table.id, status=TableStatus.OCCUPIED, current_order_id=404)
        assert table.status == TableStatus.AVAILABLE


class TestMaintenance:
    def test_maintenance_round_trip(self, service):
        table = service.add_table(1, seats=4)
        service.reserve(table.id, "Asha")
        service.set_maintenance(table.id)
        assert table.status == TableStatus.MAINTENANCE
        assert table.reserved_by is None
        service.clear_maintenance(table.id)
        assert table.status == TableStatus.AVAILABLE

    def test_occupied_table_must_be_freed_first(self, service, store):
        table = service.add_table(1, seats=4)
        service.occupy(table.id, order_id=_open_order(store, 1).id)
        with pytest.raises(TableOccupiedError):
            service.set_maintenance(table.id)
        assert table.status == TableStatus.OCCUPIED

    def test_clear_when_not_in_maintenance(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(InvalidTransitionError):
            service.clear_maintenance(table.id)

    def test_maintenance_table_cannot_be_occupied(self, service):
        table = service.add_table(1, seats=4, status=TableStatus.MAINTENANCE)
        with pytest.raises(TableNotAvailableError):
            service.occupy(table.id)


class TestUpdateAndDelete:
    def test_status_change_goes_through_state_machine(self, service):
        table = service.add_table(1, seats=4)
        service.update_table(table.id, status=TableStatus.RESERVED, reserved_by="Ravi", reserved_until="20:00")
        assert table.status == TableStatus.RESERVED
        assert table.reserved_by == "Ravi"
        service.update_table(table.id, status=TableStatus.AVAILABLE)
        assert table.status == TableStatus.AVAILABLE

    def test_status_to_available_from_maintenance(self, service):
        table = service.add_table(1, seats=4, status=TableStatus.MAINTENANCE)
        service.update_table(table.id, status=TableStatus.AVAILABLE)
        assert table.status == TableStatus.AVAILABLE

    def test_renumber_checks_uniqueness(self, service):
        service.add_table(1, seats=4)
        second = service.add_table(2, seats=4)
        with pytest.raises(DuplicateTableNumberError):
            service.update_table(second.id, number=1)
        assert second.number == 2

    def test_cannot_renumber_table_with_open_order(self, service, store, menu, tables):
        order = OrderService(store).create_order(5, [OrderLineInput(menu["curry"].id)])
        with pytest.raises(TableOccupiedError):
            service.update_table(tables[5].id, number=7)
        assert tables[5].number == 5

        OrderService(store).mark_paid(order.id)
        table = service.get_by_number(5)
        assert table.status == TableStatus.AVAILABLE
        assert table.current_order_id is None

    def test_renumber_once_order_is_paid(self, service, store, menu, tables):
        order = OrderService(store).create_order(5, [OrderLineInput(menu["curry"].id)])
        OrderService(store).mark_paid(order.id)
        service.update_table(tables[5].id, number=7)
        assert service.get_by_number(7).status == TableStatus.AVAILABLE

    def test_invalid_seats_leave_table_untouched(self, service):
        table = service.add_table(1, seats=4)
        with pytest.raises(ValidationError):
            service.update_table(table.id, seats=30, status=TableStatus.MAINTENANCE)
        assert table.status == TableStatus.AVAILABLE
        assert table.seats == 4

    def test_stale_version_rejected(self, service):
        table = service.add_table(1, seats=4)
        service.update_table(table.id, seats=6)
        with pytest.raises(ConflictError):
            service.update_table(table.id, seats=2, expected_version=1)
        assert table.seats == 6

    def test_cannot_delete_occupied_table(self, service, store):
        table = service.add_table(1, seats=4)
        service.occupy(table.id, order_id=_open_order(store, 1).id)
        with pytest.raises(TableOccupiedError):
            service.delete_table(table.id)
        service.free(table.id)
        service.delete_table(table.id)
        assert store.list(Table) == []
