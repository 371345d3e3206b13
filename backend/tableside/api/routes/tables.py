"""Table management routes.

Tables are addressed by id for admin edits and by their printed number for
the QR flow (``/tables/number/{number}``).
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.models.restaurant import Table, TableStatus
from tableside.realtime import publish
from tableside.schemas.table import TableCreate, TableOccupy, TableReserve, TableResponse, TableUpdate
from tableside.services.table_service import TableService
from tableside.store import StoreDep

router = APIRouter(prefix="/tables", tags=["tables"])


def _changed(table: Table, background_tasks: BackgroundTasks, action: str = "updated") -> TableResponse:
    result = TableResponse.model_validate(table)
    background_tasks.add_task(publish, "tables", action, result)
    return result


@router.get("", response_model=List[TableResponse])
@limiter.limit(READ_LIMIT)
def list_tables(request: Request, store: StoreDep, status: Optional[TableStatus] = None):
    return TableService(store).list_tables(status=status)


@router.get("/number/{number}", response_model=TableResponse)
@limiter.limit(READ_LIMIT)
def get_table_by_number(request: Request, store: StoreDep, number: int):
    return TableService(store).get_by_number(number)


@router.get("/{table_id}", response_model=TableResponse)
@limiter.limit(READ_LIMIT)
def get_table(request: Request, store: StoreDep, table_id: int):
    return TableService(store).get_table(table_id)


@router.post("", response_model=TableResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_table(request: Request, store: StoreDep, body: TableCreate, background_tasks: BackgroundTasks):
    table = TableService(store).add_table(body.number, body.seats, body.status)
    return _changed(table, background_tasks, "created")


@router.put("/{table_id}", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def update_table(
    request: Request,
    store: StoreDep,
    table_id: int,
    body: TableUpdate,
    background_tasks: BackgroundTasks,
):
    """Edit number/seats; a new ``status`` goes through the table state machine."""
    table = TableService(store).update_table(
        table_id,
        number=body.number,
        seats=body.seats,
        status=body.status,
        reserved_by=body.reserved_by,
        reserved_until=body.reserved_until,
        current_order_id=body.current_order_id,
        expected_version=body.version,
    )
    return _changed(table, background_tasks)


@router.delete("/{table_id}")
@limiter.limit(WRITE_LIMIT)
def delete_table(request: Request, store: StoreDep, table_id: int, background_tasks: BackgroundTasks):
    TableService(store).delete_table(table_id)
    background_tasks.add_task(publish, "tables", "deleted", {"id": table_id})
    return {"status": "deleted", "id": table_id}


@router.post("/{table_id}/reserve", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def reserve_table(
    request: Request,
    store: StoreDep,
    table_id: int,
    body: TableReserve,
    background_tasks: BackgroundTasks,
):
    table = TableService(store).reserve(table_id, body.customer_name, body.until)
    return _changed(table, background_tasks)


@router.post("/{table_id}/occupy", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def occupy_table(
    request: Request,
    store: StoreDep,
    table_id: int,
    background_tasks: BackgroundTasks,
    body: Optional[TableOccupy] = None,
):
    table = TableService(store).occupy(table_id, body.order_id if body else None)
    return _changed(table, background_tasks)


@router.post("/{table_id}/free", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def free_table(request: Request, store: StoreDep, table_id: int, background_tasks: BackgroundTasks):
    table = TableService(store).free(table_id)
    return _changed(table, background_tasks)


@router.post("/{table_id}/maintenance", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def start_maintenance(request: Request, store: StoreDep, table_id: int, background_tasks: BackgroundTasks):
    table = TableService(store).set_maintenance(table_id)
    return _changed(table, background_tasks)


@router.delete("/{table_id}/maintenance", response_model=TableResponse)
@limiter.limit(WRITE_LIMIT)
def end_maintenance(request: Request, store: StoreDep, table_id: int, background_tasks: BackgroundTasks):
    table = TableService(store).clear_maintenance(table_id)
    return _changed(table, background_tasks)
