"""Customer calls from the table - service requests and bill requests."""

from enum import Enum

from sqlalchemy import Column, Integer, DateTime, String

from tableside.core.clock import utcnow
from tableside.db.base import Base
from tableside.models.restaurant import _enum_column
from tableside.models.validators import positive


class ServiceRequestType(str, Enum):
    STAFF = "staff"
    WATER = "water"
    HOT_WATER = "hot-water"
    CLEANING = "cleaning"


class RequestStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class CompletionSource(str, Enum):
    STAFF = "staff"
    TIMEOUT = "timeout"


class ServiceRequest(Base):
    """Ad-hoc call for staff attention raised from a table."""
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    request_type = _enum_column(ServiceRequestType, nullable=False)
    status = _enum_column(RequestStatus, nullable=False, default=RequestStatus.PENDING, index=True)
    completed_by = _enum_column(CompletionSource, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)


class BillingRequest(Base):
    """Customer asking for the bill; completed when staff take payment."""
    __tablename__ = "billing_requests"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    order_id = Column(Integer, nullable=True, index=True)
    status = _enum_column(RequestStatus, nullable=False, default=RequestStatus.PENDING, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
