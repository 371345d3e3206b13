"""Table state machine.

States and the moves between them::

    available -> occupied -> available             (order cycle)
    available -> reserved -> available | occupied  (reservation cycle)
    available | occupied -> maintenance -> available  (admin override)

Tables are long-lived; there is no terminal state. Every public method loads
the table, applies one move and saves it as a single write.
"""

import logging
from typing import List, Optional

from tableside.core.exceptions import (
    AlreadyFinalizedError,
    DuplicateTableNumberError,
    InvalidTransitionError,
    NotFoundError,
    TableNotAvailableError,
    TableOccupiedError,
    ValidationError,
)
from tableside.models.restaurant import Order, OrderStatus, Table, TableStatus
from tableside.models.validators import in_range, positive
from tableside.store.base import Store

logger = logging.getLogger(__name__)

INITIAL_STATES = {TableStatus.AVAILABLE, TableStatus.MAINTENANCE}


def _has_active_order(table: Table) -> bool:
    return table.status == TableStatus.OCCUPIED and table.current_order_id is not None


class TableService:
    def __init__(self, store: Store):
        self.store = store

    # ===== LOOKUPS =====

    def list_tables(self, status: Optional[TableStatus] = None) -> List[Table]:
        tables = self.store.list(Table, status=TableStatus(status)) if status else self.store.list(Table)
        return sorted(tables, key=lambda t: t.number)

    def get_table(self, table_id: int) -> Table:
        table = self.store.get(Table, table_id)
        if not table:
            raise NotFoundError("Table", table_id)
        return table

    def get_by_number(self, number: int) -> Table:
        table = self.store.find_one(Table, number=number)
        if not table:
            raise NotFoundError("Table number", number)
        return table

    # ===== ADMIN =====

    def add_table(self, number: int, seats: int, status: TableStatus = TableStatus.AVAILABLE) -> Table:
        status = TableStatus(status)
        if status not in INITIAL_STATES:
            raise ValidationError(f"A new table must start as available or maintenance, not {status.value}")
        if self.store.find_one(Table, number=number):
            logger.warning(f"Rejected duplicate table number {number}")
            raise DuplicateTableNumberError(number)

        table = Table(number=number, seats=seats, status=status)
        self.store.add(table)
        logger.info(f"Table {table.number} added with {table.seats} seats ({status.value})")
        return table

    def update_table(
        self,
        table_id: int,
        number: Optional[int] = None,
        seats: Optional[int] = None,
        status: Optional[TableStatus] = None,
        reserved_by: Optional[str] = None,
        reserved_until: Optional[str] = None,
        current_order_id: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> Table:
        """Edit a table. A status change is routed through the state machine."""
        table = self.get_table(table_id)
        table.check_version(expected_version)
        positive("number", number)
        in_range("seats", seats, 1, 20)

        if number is not None and number != table.number:
            if _has_active_order(table):
                logger.warning(f"Table {table.number} cannot be renumbered while order {table.current_order_id} is open")
                raise TableOccupiedError(table.number)
            if self.store.find_one(Table, number=number):
                raise DuplicateTableNumberError(number)
        if status is not None:
            status = TableStatus(status)
            if status != table.status:
                if status == TableStatus.OCCUPIED:
                    self._check_order(number if number is not None else table.number, current_order_id)
                self._apply_status(table, status, reserved_by, reserved_until, current_order_id)

        if number is not None:
            table.number = number
        if seats is not None:
            table.seats = seats
        self.store.save(table)
        logger.info(f"Table {table.number} updated (status: {table.status.value})")
        return table

    def delete_table(self, table_id: int) -> None:
        table = self.get_table(table_id)
        if table.status == TableStatus.OCCUPIED:
            raise TableOccupiedError(table.number)
        self.store.delete(table)
        logger.info(f"Table {table.number} deleted")

    # ===== STATE MACHINE =====

    def reserve(self, table_id: int, customer_name: str, until: Optional[str] = None) -> Table:
        table = self.get_table(table_id)
        self._reserve(table, customer_name, until)
        return self._commit(table, "reserved")

    def occupy(self, table_id: int, order_id: Optional[int] = None) -> Table:
        """Seat guests, optionally against an open order placed on this table."""
        table = self.get_table(table_id)
        self._check_order(table.number, order_id)
        self._occupy(table, order_id)
        return self._commit(table, "occupied")

    def free(self, table_id: int) -> Table:
        table = self.get_table(table_id)
        self._free(table)
        return self._commit(table, "freed")

    def set_maintenance(self, table_id: int) -> Table:
        table = self.get_table(table_id)
        self._set_maintenance(table)
        return self._commit(table, "put under maintenance")

    def clear_maintenance(self, table_id: int) -> Table:
        table = self.get_table(table_id)
        self._clear_maintenance(table)
        return self._commit(table, "back from maintenance")

    # ===== ORDER HOOKS =====

    def seat_order(self, table: Table, order_id: int) -> Table:
        """Bind a dine-in order to its table.

        A table that is already occupied follows the newest order, so paying
        an earlier order on the same table does not free it.
        """
        if table.status == TableStatus.OCCUPIED:
            table.current_order_id = order_id
        else:
            self._occupy(table, order_id)
        return self._commit(table, f"seated with order {order_id}")

    def release_order(self, order_id: int) -> Optional[Table]:
        """Free whichever table is still held by this order."""
        table = self.store.find_one(Table, current_order_id=order_id)
        if not table:
            return None
        table.status = TableStatus.AVAILABLE
        table.current_order_id = None
        return self._commit(table, f"released by order {order_id}")

    def check_can_seat(self, table: Table) -> None:
        if table.status == TableStatus.MAINTENANCE:
            raise TableNotAvailableError(table.number, table.status.value)

    def _check_order(self, table_number: int, order_id: Optional[int]) -> None:
        if order_id is None:
            return
        order = self.store.get(Order, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        if order.table_number != table_number:
            raise ValidationError(f"Order {order_id} belongs to table {order.table_number}, not {table_number}")
        if order.status == OrderStatus.PAID:
            raise AlreadyFinalizedError("Order", order_id, order.status.value)

    # ===== TRANSITIONS (mutate only) =====

    def _apply_status(self, table, status, reserved_by, reserved_until, current_order_id) -> None:
        if status == TableStatus.RESERVED:
            self._reserve(table, reserved_by, reserved_until)
        elif status == TableStatus.OCCUPIED:
            self._occupy(table, current_order_id)
        elif status == TableStatus.MAINTENANCE:
            self._set_maintenance(table)
        elif table.status == TableStatus.MAINTENANCE:
            self._clear_maintenance(table)
        else:
            self._free(table)

    def _reserve(self, table: Table, customer_name: Optional[str], until: Optional[str]) -> None:
        if table.status != TableStatus.AVAILABLE:
            logger.warning(f"Table {table.number} cannot be reserved while {table.status.value}")
            raise TableNotAvailableError(table.number, table.status.value)
        if not customer_name or not customer_name.strip():
            raise ValidationError("A reservation needs the customer's name")
        table.status = TableStatus.RESERVED
        table.reserved_by = customer_name.strip()
        table.reserved_until = until

    def _occupy(self, table: Table, order_id: Optional[int]) -> None:
        if table.status not in (TableStatus.AVAILABLE, TableStatus.RESERVED):
            logger.warning(f"Table {table.number} cannot be occupied while {table.status.value}")
            raise TableNotAvailableError(table.number, table.status.value)
        table.status = TableStatus.OCCUPIED
        table.current_order_id = order_id
        table.reserved_by = None
        table.reserved_until = None

    def _free(self, table: Table) -> None:
        if table.status not in (TableStatus.OCCUPIED, TableStatus.RESERVED):
            raise InvalidTransitionError("table", table.status.value, TableStatus.AVAILABLE.value)
        self._clear(table)

    def _set_maintenance(self, table: Table) -> None:
        if _has_active_order(table):
            raise TableOccupiedError(table.number)
        self._clear(table)
        table.status = TableStatus.MAINTENANCE

    def _clear_maintenance(self, table: Table) -> None:
        if _has_active_order(table):
            raise TableOccupiedError(table.number)
        if table.status != TableStatus.MAINTENANCE:
            raise InvalidTransitionError("table", table.status.value, TableStatus.AVAILABLE.value)
        table.status = TableStatus.AVAILABLE

    @staticmethod
    def _clear(table: Table) -> None:
        table.status = TableStatus.AVAILABLE
        table.current_order_id = None
        table.reserved_by = None
        table.reserved_until = None

    def _commit(self, table: Table, what: str) -> Table:
        self.store.save(table)
        logger.info(f"Table {table.number} {what} -> {table.status.value}")
        return table
