"""Reservation routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.models.reservations import ReservationStatus
from tableside.models.restaurant import Table
from tableside.realtime import publish
from tableside.schemas.reservations import ReservationCreate, ReservationResponse, ReservationUpdate
from tableside.schemas.table import TableResponse
from tableside.services.reservation_service import ReservationService
from tableside.store import StoreDep

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("", response_model=List[ReservationResponse])
@limiter.limit(READ_LIMIT)
def list_reservations(
    request: Request,
    store: StoreDep,
    status: Optional[ReservationStatus] = None,
    date: Optional[str] = None,
):
    """Bookings ordered by date and time."""
    return ReservationService(store).list_reservations(status=status, date=date)


@router.get("/{reservation_id}", response_model=ReservationResponse)
@limiter.limit(READ_LIMIT)
def get_reservation(request: Request, store: StoreDep, reservation_id: int):
    return ReservationService(store).get_reservation(reservation_id)


@router.post("", response_model=ReservationResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_reservation(
    request: Request,
    store: StoreDep,
    body: ReservationCreate,
    background_tasks: BackgroundTasks,
):
    reservation = ReservationService(store).create(**body.model_dump())
    result = ReservationResponse.model_validate(reservation)
    background_tasks.add_task(publish, "reservations", "created", result)
    return result


@router.patch("/{reservation_id}", response_model=ReservationResponse)
@limiter.limit(WRITE_LIMIT)
def update_reservation(
    request: Request,
    store: StoreDep,
    reservation_id: int,
    body: ReservationUpdate,
    background_tasks: BackgroundTasks,
):
    """Confirm, cancel or complete a booking."""
    reservation = ReservationService(store).update_status(reservation_id, body.status, body.table_number)
    result = ReservationResponse.model_validate(reservation)
    background_tasks.add_task(publish, "reservations", "updated", result)
    if reservation.table_number is not None:
        table = store.find_one(Table, number=reservation.table_number)
        if table:
            background_tasks.add_task(publish, "tables", "updated", TableResponse.model_validate(table))
    return result
