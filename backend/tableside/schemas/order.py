"""Customer order schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, Field

from tableside.models.restaurant import OrderStatus, OrderType, PaymentMode
from tableside.schemas.base import CamelModel


class OrderLineCreate(CamelModel):
    """A cart line. Any price the client sends is ignored."""

    menu_item_id: int = Field(validation_alias=AliasChoices("menuItemId", "menu_item_id", "id"))
    quantity: int = 1
    pack: bool = False


class OrderCreate(CamelModel):
    table_number: int = Field(
        alias="table", validation_alias=AliasChoices("table", "tableNumber", "table_number")
    )
    lines: List[OrderLineCreate] = Field(
        default_factory=list, validation_alias=AliasChoices("lines", "items")
    )
    payment_mode: PaymentMode = PaymentMode.CASH
    order_type: OrderType = OrderType.DINE_IN
    scheduled_time: Optional[datetime] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None


class OrderUpdate(CamelModel):
    """PATCH body. ``version`` opts into the stale-write check."""

    status: Optional[OrderStatus] = None
    payment_mode: Optional[PaymentMode] = None
    scheduled_time: Optional[datetime] = None
    customer_id: Optional[str] = None
    version: Optional[int] = None


class OrderLineResponse(CamelModel):
    id: Optional[int] = None
    menu_item_id: int
    name: str
    quantity: int
    unit_price: float
    pack: bool
    line_total: float


class OrderResponse(CamelModel):
    id: int
    table_number: int = Field(alias="table")
    customer_name: Optional[str] = None
    customer_id: Optional[str] = None
    lines: List[OrderLineResponse]
    status: OrderStatus
    order_type: OrderType
    payment_mode: PaymentMode
    total_amount: float
    loyalty_points_earned: int
    scheduled_time: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStats(CamelModel):
    total_orders: int
    by_status: Dict[str, int]
    open_orders: int
    revenue: float
