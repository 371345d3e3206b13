"""Calls from the table: service requests and bill requests.

Both follow a two-state lifecycle, ``pending -> completed``. Completing a
request twice is a no-op, so a waiter tapping "done" and the timeout sweep
can race without either side failing.

Service requests that nobody answers are closed by ``expire_stale()``, which
the application runs periodically via ``run_service_request_expiry()``.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from tableside.core.clock import as_utc, utcnow
from tableside.core.config import settings
from tableside.core.exceptions import NotFoundError, ValidationError
from tableside.models.requests import (
    BillingRequest,
    CompletionSource,
    RequestStatus,
    ServiceRequest,
    ServiceRequestType,
)
from tableside.models.restaurant import OrderStatus
from tableside.services.order_service import OrderService
from tableside.services.table_service import TableService
from tableside.store.base import Store

logger = logging.getLogger(__name__)


def _filters(status: Optional[RequestStatus], table_number: Optional[int]) -> Dict[str, Any]:
    filters: Dict[str, Any] = {}
    if status is not None:
        filters["status"] = RequestStatus(status)
    if table_number is not None:
        filters["table_number"] = table_number
    return filters


class ServiceRequestService:
    """Water, hot water, cleaning or a waiter, raised from the table."""

    def __init__(self, store: Store):
        self.store = store
        self.tables = TableService(store)

    def raise_request(self, table_number: int, request_type: ServiceRequestType) -> ServiceRequest:
        table = self.tables.get_by_number(table_number)
        request = ServiceRequest(
            table_number=table.number,
            request_type=ServiceRequestType(request_type),
            status=RequestStatus.PENDING,
        )
        self.store.add(request)
        logger.info(f"Service request {request.id}: {request.request_type.value} for table {table.number}")
        return request

    def list_requests(
        self,
        status: Optional[RequestStatus] = None,
        table_number: Optional[int] = None,
    ) -> List[ServiceRequest]:
        return self.store.list(ServiceRequest, **_filters(status, table_number))

    def get_request(self, request_id: int) -> ServiceRequest:
        request = self.store.get(ServiceRequest, request_id)
        if not request:
            raise NotFoundError("Service request", request_id)
        return request

    def complete(self, request_id: int, source: CompletionSource = CompletionSource.STAFF) -> ServiceRequest:
        request = self.get_request(request_id)
        if request.status == RequestStatus.COMPLETED:
            logger.debug(f"Service request {request.id} already completed")
            return request
        return self._complete(request, CompletionSource(source))

    def expire_stale(
        self,
        now: Optional[datetime] = None,
        timeout_seconds: Optional[int] = None,
    ) -> List[ServiceRequest]:
        """Complete pending requests older than the timeout; returns those closed."""
        now = as_utc(now) or utcnow()
        timeout = timeout_seconds if timeout_seconds is not None else settings.service_request_timeout_seconds
        cutoff = now - timedelta(seconds=timeout)

        expired = []
        for request in self.store.list(ServiceRequest, status=RequestStatus.PENDING):
            if as_utc(request.created_at) <= cutoff:
                expired.append(self._complete(request, CompletionSource.TIMEOUT, now))
        if expired:
            logger.info(f"Expired {len(expired)} unanswered service requests")
        return expired

    def _complete(
        self,
        request: ServiceRequest,
        source: CompletionSource,
        when: Optional[datetime] = None,
    ) -> ServiceRequest:
        request.status = RequestStatus.COMPLETED
        request.completed_by = source
        request.completed_at = when or utcnow()
        self.store.save(request)
        logger.info(f"Service request {request.id} completed ({source.value})")
        return request


class BillingRequestService:
    """Bill requests, linked to the order being paid."""

    def __init__(self, store: Store):
        self.store = store
        self.tables = TableService(store)
        self.orders = OrderService(store)

    def raise_request(self, table_number: int, order_id: Optional[int] = None) -> BillingRequest:
        """Ask for the bill. Without an explicit order, the table's current order is billed."""
        table = self.tables.get_by_number(table_number)
        if order_id is not None:
            order = self.orders.get_order(order_id)
            if order.table_number != table.number:
                raise ValidationError(f"Order {order.id} belongs to table {order.table_number}, not {table.number}")
        else:
            order_id = table.current_order_id

        request = BillingRequest(
            table_number=table.number,
            order_id=order_id,
            status=RequestStatus.PENDING,
        )
        self.store.add(request)
        logger.info(f"Billing request {request.id} for table {table.number} (order {order_id})")
        return request

    def list_requests(
        self,
        status: Optional[RequestStatus] = None,
        table_number: Optional[int] = None,
    ) -> List[BillingRequest]:
        return self.store.list(BillingRequest, **_filters(status, table_number))

    def get_request(self, request_id: int) -> BillingRequest:
        request = self.store.get(BillingRequest, request_id)
        if not request:
            raise NotFoundError("Billing request", request_id)
        return request

    def complete(self, request_id: int, mark_order_paid: Optional[bool] = None) -> BillingRequest:
        """Record payment received.

        Unless switched off, the linked order is marked paid first, which also
        frees its table.
        """
        request = self.get_request(request_id)
        if request.status == RequestStatus.COMPLETED:
            logger.debug(f"Billing request {request.id} already completed")
            return request

        if mark_order_paid is None:
            mark_order_paid = settings.billing_marks_order_paid
        if mark_order_paid and request.order_id is not None:
            order = self.orders.get_order(request.order_id)
            if order.status != OrderStatus.PAID:
                self.orders.mark_paid(order.id)

        request.status = RequestStatus.COMPLETED
        request.completed_at = utcnow()
        self.store.save(request)
        logger.info(f"Billing request {request.id} completed for table {request.table_number}")
        return request


def run_service_request_expiry() -> List[ServiceRequest]:
    """Standalone sweep, called from the application's background task."""
    from tableside.store import store_scope

    with store_scope() as store:
        return ServiceRequestService(store).expire_stale()
