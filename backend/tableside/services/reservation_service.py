"""Table bookings made from the customer menu."""

import logging
from typing import Dict, FrozenSet, List, Optional

from tableside.core.exceptions import AlreadyFinalizedError, InvalidTransitionError, NotFoundError
from tableside.core.sanitize import sanitize_text
from tableside.models.reservations import Reservation, ReservationStatus
from tableside.models.restaurant import Table, TableStatus
from tableside.services.table_service import TableService
from tableside.store.base import Store

logger = logging.getLogger(__name__)

RESERVATION_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
}
TERMINAL_STATES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED})


class ReservationService:
    def __init__(self, store: Store):
        self.store = store
        self.tables = TableService(store)

    def create(
        self,
        customer_name: str,
        customer_phone: str,
        date: str,
        time: str,
        party_size: int,
        special_requests: Optional[str] = None,
        table_number: Optional[int] = None,
    ) -> Reservation:
        if table_number is not None:
            self.tables.get_by_number(table_number)
        reservation = Reservation(
            customer_name=sanitize_text(customer_name),
            customer_phone=customer_phone.strip() if customer_phone else customer_phone,
            date=date,
            time=time,
            party_size=party_size,
            special_requests=sanitize_text(special_requests),
            table_number=table_number,
            status=ReservationStatus.PENDING,
        )
        self.store.add(reservation)
        logger.info(
            f"Reservation {reservation.id}: {reservation.party_size} guests on "
            f"{reservation.date} {reservation.time}"
        )
        return reservation

    def list_reservations(
        self,
        status: Optional[ReservationStatus] = None,
        date: Optional[str] = None,
    ) -> List[Reservation]:
        filters = {}
        if status is not None:
            filters["status"] = ReservationStatus(status)
        if date is not None:
            filters["date"] = date
        return sorted(self.store.list(Reservation, **filters), key=lambda r: (r.date, r.time, r.id))

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.store.get(Reservation, reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    def update_status(
        self,
        reservation_id: int,
        status: ReservationStatus,
        table_number: Optional[int] = None,
    ) -> Reservation:
        """Move a booking along its lifecycle.

        Confirming with a table holds that table for the guest; cancelling a
        confirmed booking releases the table if it is still held for them.
        """
        reservation = self.get_reservation(reservation_id)
        status = ReservationStatus(status)
        current = reservation.status

        if current in TERMINAL_STATES:
            raise AlreadyFinalizedError("Reservation", reservation.id, current.value)
        if status not in RESERVATION_TRANSITIONS[current]:
            logger.warning(f"Reservation {reservation.id}: rejected {current.value} -> {status.value}")
            raise InvalidTransitionError("reservation", current.value, status.value)

        if status == ReservationStatus.CONFIRMED:
            number = table_number if table_number is not None else reservation.table_number
            if number is not None:
                table = self.tables.get_by_number(number)
                self.tables.reserve(table.id, reservation.customer_name, until=reservation.time)
                reservation.table_number = number
        elif status == ReservationStatus.CANCELLED and current == ReservationStatus.CONFIRMED:
            self._release_table(reservation)

        reservation.status = status
        self.store.save(reservation)
        logger.info(f"Reservation {reservation.id}: {current.value} -> {status.value}")
        return reservation

    def _release_table(self, reservation: Reservation) -> None:
        if reservation.table_number is None:
            return
        table = self.store.find_one(Table, number=reservation.table_number)
        if table and table.status == TableStatus.RESERVED and table.reserved_by == reservation.customer_name:
            self.tables.free(table.id)
