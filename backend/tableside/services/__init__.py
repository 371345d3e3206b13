# Services module

from tableside.services.menu_service import MenuService
from tableside.services.table_service import TableService
from tableside.services.loyalty_service import (
    LoyaltyService,
    LOYALTY_TIERS,
    REWARDS_CATALOG,
    loyalty_points_for,
)
from tableside.services.order_service import OrderService, OrderLineInput, compute_total
from tableside.services.service_request_service import (
    ServiceRequestService,
    BillingRequestService,
    run_service_request_expiry,
)
from tableside.services.reservation_service import ReservationService
from tableside.services.feedback_service import FeedbackService

__all__ = [
    "MenuService",
    "TableService",
    "LoyaltyService",
    "LOYALTY_TIERS",
    "REWARDS_CATALOG",
    "loyalty_points_for",
    "OrderService",
    "OrderLineInput",
    "compute_total",
    "ServiceRequestService",
    "BillingRequestService",
    "run_service_request_expiry",
    "ReservationService",
    "FeedbackService",
]
