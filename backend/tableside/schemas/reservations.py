"""Reservation schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from tableside.models.reservations import ReservationStatus
from tableside.schemas.base import CamelModel


class ReservationCreate(CamelModel):
    customer_name: str
    customer_phone: str = Field(
        validation_alias=AliasChoices("customerPhone", "customer_phone", "contactNumber")
    )
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str = Field(pattern=r"^\d{2}:\d{2}$")
    party_size: int
    special_requests: Optional[str] = None
    table_number: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("tableNumber", "table_number", "table")
    )


class ReservationUpdate(CamelModel):
    status: ReservationStatus
    table_number: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("tableNumber", "table_number", "table")
    )


class ReservationResponse(CamelModel):
    id: int
    customer_name: str
    customer_phone: str
    date: str
    time: str
    party_size: int
    special_requests: Optional[str] = None
    table_number: Optional[int] = None
    status: ReservationStatus
    created_at: Optional[datetime] = None
