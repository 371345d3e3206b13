"""Table schemas."""

from datetime import datetime
from typing import Optional

from tableside.models.restaurant import TableStatus
from tableside.schemas.base import CamelModel


class TableCreate(CamelModel):
    number: int
    seats: int = 4
    status: TableStatus = TableStatus.AVAILABLE


class TableUpdate(CamelModel):
    """Status changes are applied through the table state machine."""

    number: Optional[int] = None
    seats: Optional[int] = None
    status: Optional[TableStatus] = None
    reserved_by: Optional[str] = None
    reserved_until: Optional[str] = None
    current_order_id: Optional[int] = None
    version: Optional[int] = None


class TableReserve(CamelModel):
    customer_name: str
    until: Optional[str] = None  # HH:MM


class TableOccupy(CamelModel):
    order_id: Optional[int] = None


class TableResponse(CamelModel):
    id: int
    number: int
    seats: int
    status: TableStatus
    current_order_id: Optional[int] = None
    reserved_by: Optional[str] = None
    reserved_until: Optional[str] = None
    version: int
    created_at: Optional[datetime] = None
