"""Service request routes (water, cleaning, call a waiter)."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.models.requests import RequestStatus
from tableside.realtime import publish
from tableside.schemas.requests import ServiceRequestCreate, ServiceRequestResponse
from tableside.services.service_request_service import ServiceRequestService
from tableside.store import StoreDep

router = APIRouter(prefix="/service-requests", tags=["service-requests"])


@router.get("", response_model=List[ServiceRequestResponse])
@limiter.limit(READ_LIMIT)
def list_service_requests(
    request: Request,
    store: StoreDep,
    status: Optional[RequestStatus] = None,
    table: Optional[int] = Query(None, description="Table number"),
):
    return ServiceRequestService(store).list_requests(status=status, table_number=table)


@router.get("/{request_id}", response_model=ServiceRequestResponse)
@limiter.limit(READ_LIMIT)
def get_service_request(request: Request, store: StoreDep, request_id: int):
    return ServiceRequestService(store).get_request(request_id)


@router.post("", response_model=ServiceRequestResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def raise_service_request(
    request: Request,
    store: StoreDep,
    body: ServiceRequestCreate,
    background_tasks: BackgroundTasks,
):
    created = ServiceRequestService(store).raise_request(body.table_number, body.request_type)
    result = ServiceRequestResponse.model_validate(created)
    background_tasks.add_task(publish, "service-requests", "created", result)
    return result


@router.post("/{request_id}/complete", response_model=ServiceRequestResponse)
@limiter.limit(WRITE_LIMIT)
def complete_service_request(
    request: Request,
    store: StoreDep,
    request_id: int,
    background_tasks: BackgroundTasks,
):
    """Mark done. Completing an already completed request is a no-op."""
    completed = ServiceRequestService(store).complete(request_id)
    result = ServiceRequestResponse.model_validate(completed)
    background_tasks.add_task(publish, "service-requests", "completed", result)
    return result
