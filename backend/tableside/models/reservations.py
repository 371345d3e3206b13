"""Reservation model."""

from enum import Enum

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.restaurant import _enum_column
from tableside.models.validators import in_range, required_text


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Reservation(TimestampMixin, Base):
    """Table booking made from the customer menu."""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)

    # Guest info
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)

    # Reservation details
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    time = Column(String(5), nullable=False)  # HH:MM
    party_size = Column(Integer, nullable=False)
    special_requests = Column(Text, nullable=True)

    # Table assignment
    table_number = Column(Integer, nullable=True)

    status = _enum_column(ReservationStatus, nullable=False, default=ReservationStatus.PENDING)

    @validates('customer_name', 'customer_phone')
    def _validate_text(self, key, value):
        return required_text(key, value)

    @validates('party_size')
    def _validate_party_size(self, key, value):
        return in_range(key, value, 1, 20)
