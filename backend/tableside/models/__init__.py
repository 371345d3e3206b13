"""SQLAlchemy models."""

from tableside.models.restaurant import (
    MenuItem,
    Table,
    Order,
    OrderLine,
    OrderStatus,
    OrderType,
    PaymentMode,
    TableStatus,
)
from tableside.models.requests import (
    ServiceRequest,
    BillingRequest,
    ServiceRequestType,
    RequestStatus,
    CompletionSource,
)
from tableside.models.reservations import Reservation, ReservationStatus
from tableside.models.customer import Feedback, LoyaltyAccount

__all__ = [
    "MenuItem",
    "Table",
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderType",
    "PaymentMode",
    "TableStatus",
    "ServiceRequest",
    "BillingRequest",
    "ServiceRequestType",
    "RequestStatus",
    "CompletionSource",
    "Reservation",
    "ReservationStatus",
    "Feedback",
    "LoyaltyAccount",
]
