"""Bill request routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from tableside.api.routes.orders import publish_order
from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.models.restaurant import Order
from tableside.models.requests import RequestStatus
from tableside.realtime import publish
from tableside.schemas.requests import BillingRequestComplete, BillingRequestCreate, BillingRequestResponse
from tableside.services.service_request_service import BillingRequestService
from tableside.store import StoreDep

router = APIRouter(prefix="/billing-requests", tags=["billing-requests"])


@router.get("", response_model=List[BillingRequestResponse])
@limiter.limit(READ_LIMIT)
def list_billing_requests(
    request: Request,
    store: StoreDep,
    status: Optional[RequestStatus] = None,
    table: Optional[int] = Query(None, description="Table number"),
):
    return BillingRequestService(store).list_requests(status=status, table_number=table)


@router.get("/{request_id}", response_model=BillingRequestResponse)
@limiter.limit(READ_LIMIT)
def get_billing_request(request: Request, store: StoreDep, request_id: int):
    return BillingRequestService(store).get_request(request_id)


@router.post("", response_model=BillingRequestResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def raise_billing_request(
    request: Request,
    store: StoreDep,
    body: BillingRequestCreate,
    background_tasks: BackgroundTasks,
):
    """Ask for the bill; bills the table's current order unless ``orderId`` is given."""
    created = BillingRequestService(store).raise_request(body.table_number, body.order_id)
    result = BillingRequestResponse.model_validate(created)
    background_tasks.add_task(publish, "billing-requests", "created", result)
    return result


@router.post("/{request_id}/complete", response_model=BillingRequestResponse)
@limiter.limit(WRITE_LIMIT)
def complete_billing_request(
    request: Request,
    store: StoreDep,
    request_id: int,
    background_tasks: BackgroundTasks,
    body: Optional[BillingRequestComplete] = None,
):
    """Record payment received; by default the linked order is marked paid too."""
    completed = BillingRequestService(store).complete(
        request_id, mark_order_paid=body.mark_order_paid if body else None
    )
    result = BillingRequestResponse.model_validate(completed)
    background_tasks.add_task(publish, "billing-requests", "completed", result)
    if completed.order_id is not None:
        order = store.get(Order, completed.order_id)
        if order:
            publish_order(store, background_tasks, order, "updated")
    return result
