"""Tests for table reservations."""

import pytest

from tableside.core.exceptions import (
    AlreadyFinalizedError,
    InvalidTransitionError,
    NotFoundError,
    TableNotAvailableError,
    ValidationError,
)
from tableside.models import ReservationStatus, TableStatus
from tableside.services import ReservationService, TableService


@pytest.fixture
def service(store):
    return ReservationService(store)


def _book(service, **overrides):
    fields = dict(
        customer_name="Asha Rao",
        customer_phone="9876543210",
        date="2026-10-20",
        time="19:30",
        party_size=4,
    )
    fields.update(overrides)
    return service.create(**fields)


class TestCreateReservation:
    def test_new_booking_is_pending(self, service):
        reservation = _book(service, special_requests="Window   seat <please>")
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.special_requests == "Window seat &lt;please&gt;"

    def test_party_size_limits(self, service):
        with pytest.raises(ValidationError):
            _book(service, party_size=0)
        with pytest.raises(ValidationError):
            _book(service, party_size=21)

    def test_name_is_required(self, service):
        with pytest.raises(ValidationError):
            _book(service, customer_name="   ")

    def test_unknown_table(self, service, tables):
        with pytest.raises(NotFoundError):
            _book(service, table_number=40)

    def test_listing_is_chronological(self, service):
        late = _book(service, date="2026-10-21", time="12:00")
        early = _book(service, date="2026-10-20", time="20:00")
        earliest = _book(service, date="2026-10-20", time="18:00")
        assert [r.id for r in service.list_reservations()] == [earliest.id, early.id, late.id]
        assert [r.id for r in service.list_reservations(date="2026-10-21")] == [late.id]


class TestReservationLifecycle:
    def test_confirm_holds_the_table(self, service, tables, store):
        reservation = _book(service)
        service.update_status(reservation.id, ReservationStatus.CONFIRMED, table_number=3)

        table = TableService(store).get_by_number(3)
        assert table.status == TableStatus.RESERVED
        assert table.reserved_by == "Asha Rao"
        assert table.reserved_until == "19:30"
        assert reservation.table_number == 3

    def test_confirm_without_table(self, service):
        reservation = _book(service)
        service.update_status(reservation.id, ReservationStatus.CONFIRMED)
        assert reservation.status == ReservationStatus.CONFIRMED

    def test_confirm_on_busy_table_fails(self, service, tables, store):
        TableService(store).occupy(tables[3].id)
        reservation = _book(service, table_number=3)
        with pytest.raises(TableNotAvailableError):
            service.update_status(reservation.id, ReservationStatus.CONFIRMED)
        assert service.get_reservation(reservation.id).status == ReservationStatus.PENDING

    def test_cancel_releases_the_table(self, service, tables, store):
        reservation = _book(service, table_number=5)
        service.update_status(reservation.id, ReservationStatus.CONFIRMED)
        service.update_status(reservation.id, ReservationStatus.CANCELLED)
        assert TableService(store).get_by_number(5).status == TableStatus.AVAILABLE

    def test_cancel_leaves_a_seated_table_alone(self, service, tables, store):
        reservation = _book(service, table_number=5)
        service.update_status(reservation.id, ReservationStatus.CONFIRMED)
        TableService(store).occupy(tables[5].id)
        service.update_status(reservation.id, ReservationStatus.CANCELLED)
        assert TableService(store).get_by_number(5).status == TableStatus.OCCUPIED

    def test_pending_cannot_complete(self, service):
        reservation = _book(service)
        with pytest.raises(InvalidTransitionError):
            service.update_status(reservation.id, ReservationStatus.COMPLETED)

    def test_terminal_states_are_final(self, service):
        reservation = _book(service)
        service.update_status(reservation.id, ReservationStatus.CANCELLED)
        with pytest.raises(AlreadyFinalizedError):
            service.update_status(reservation.id, ReservationStatus.CONFIRMED)

    def test_filter_by_status(self, service):
        kept = _book(service)
        dropped = _book(service, customer_name="Ravi")
        service.update_status(dropped.id, ReservationStatus.CANCELLED)
        pending = service.list_reservations(status=ReservationStatus.PENDING)
        assert [r.id for r in pending] == [kept.id]
