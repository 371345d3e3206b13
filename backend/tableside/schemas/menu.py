"""Menu item schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from tableside.schemas.base import CamelModel


class MenuItemCreate(CamelModel):
    name: str
    description: str = ""
    price: Decimal
    category: str
    image: Optional[str] = None
    is_vegetarian: bool = False
    is_spicy: bool = False
    preparation_time: int = 15
    in_stock: bool = True
    inventory: int = 100


class MenuItemUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    image: Optional[str] = None
    is_vegetarian: Optional[bool] = None
    is_spicy: Optional[bool] = None
    preparation_time: Optional[int] = None
    in_stock: Optional[bool] = None
    inventory: Optional[int] = None


class MenuItemResponse(CamelModel):
    id: int
    name: str
    description: str
    price: float
    category: str
    image: Optional[str] = None
    is_vegetarian: bool
    is_spicy: bool
    preparation_time: int
    in_stock: bool
    inventory: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
