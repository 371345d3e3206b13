"""Customer order routes: checkout, kitchen progress and payment."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.models.restaurant import Order, OrderStatus, Table
from tableside.realtime import publish
from tableside.schemas.order import OrderCreate, OrderResponse, OrderStats, OrderUpdate
from tableside.schemas.table import TableResponse
from tableside.services.order_service import OrderLineInput, OrderService
from tableside.store import Store, StoreDep

router = APIRouter(prefix="/orders", tags=["orders"])


def publish_order(store: Store, background_tasks: BackgroundTasks, order: Order, action: str) -> OrderResponse:
    """Queue push events for an order and the table it sits on."""
    result = OrderResponse.model_validate(order)
    background_tasks.add_task(publish, "orders", action, result)
    table = store.find_one(Table, number=order.table_number)
    if table:
        background_tasks.add_task(publish, "tables", "updated", TableResponse.model_validate(table))
    return result


@router.get("", response_model=List[OrderResponse])
@limiter.limit(READ_LIMIT)
def list_orders(
    request: Request,
    store: StoreDep,
    status: Optional[OrderStatus] = None,
    table: Optional[int] = Query(None, description="Table number"),
):
    return OrderService(store).list_orders(status=status, table_number=table)


@router.get("/stats", response_model=OrderStats)
@limiter.limit(READ_LIMIT)
def get_order_stats(request: Request, store: StoreDep):
    """Order counts per status and revenue from paid orders."""
    return OrderService(store).order_stats()


@router.get("/{order_id}", response_model=OrderResponse)
@limiter.limit(READ_LIMIT)
def get_order(request: Request, store: StoreDep, order_id: int):
    return OrderService(store).get_order(order_id)


@router.post("", response_model=OrderResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_order(request: Request, store: StoreDep, body: OrderCreate, background_tasks: BackgroundTasks):
    """Place an order. Totals are computed here; any client-side price is ignored."""
    order = OrderService(store).create_order(
        table_number=body.table_number,
        lines=[OrderLineInput(line.menu_item_id, line.quantity, line.pack) for line in body.lines],
        payment_mode=body.payment_mode,
        order_type=body.order_type,
        scheduled_time=body.scheduled_time,
        customer_id=body.customer_id,
        customer_name=body.customer_name,
    )
    return publish_order(store, background_tasks, order, "created")


@router.patch("/{order_id}", response_model=OrderResponse)
@limiter.limit(WRITE_LIMIT)
def update_order(
    request: Request,
    store: StoreDep,
    order_id: int,
    body: OrderUpdate,
    background_tasks: BackgroundTasks,
):
    """Advance the status one step and/or edit payment details.

    Send ``version`` to have the write rejected if the order changed since
    it was read.
    """
    order = OrderService(store).update_order(
        order_id,
        status=body.status,
        payment_mode=body.payment_mode,
        scheduled_time=body.scheduled_time,
        customer_id=body.customer_id,
        expected_version=body.version,
    )
    return publish_order(store, background_tasks, order, "updated")


@router.post("/{order_id}/pay", response_model=OrderResponse)
@limiter.limit(WRITE_LIMIT)
def pay_order(request: Request, store: StoreDep, order_id: int, background_tasks: BackgroundTasks):
    """Close the order from any open status and free its table."""
    order = OrderService(store).mark_paid(order_id)
    return publish_order(store, background_tasks, order, "paid")
