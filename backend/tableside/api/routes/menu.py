"""Menu catalogue routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.realtime import publish
from tableside.schemas.menu import MenuItemCreate, MenuItemResponse, MenuItemUpdate
from tableside.services.menu_service import MenuService
from tableside.store import StoreDep

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("", response_model=List[MenuItemResponse])
@limiter.limit(READ_LIMIT)
def list_menu_items(
    request: Request,
    store: StoreDep,
    category: Optional[str] = None,
    in_stock: bool = Query(False, alias="inStock"),
):
    """List menu items, optionally by category or only those in stock."""
    return MenuService(store).list_items(category=category, in_stock_only=in_stock)


@router.get("/categories", response_model=List[str])
@limiter.limit(READ_LIMIT)
def list_categories(request: Request, store: StoreDep):
    return MenuService(store).list_categories()


@router.get("/{item_id}", response_model=MenuItemResponse)
@limiter.limit(READ_LIMIT)
def get_menu_item(request: Request, store: StoreDep, item_id: int):
    return MenuService(store).get_item(item_id)


@router.post("", response_model=MenuItemResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_menu_item(request: Request, store: StoreDep, body: MenuItemCreate, background_tasks: BackgroundTasks):
    item = MenuService(store).create_item(**body.model_dump())
    result = MenuItemResponse.model_validate(item)
    background_tasks.add_task(publish, "menu", "created", result)
    return result


@router.put("/{item_id}", response_model=MenuItemResponse)
@limiter.limit(WRITE_LIMIT)
def update_menu_item(
    request: Request,
    store: StoreDep,
    item_id: int,
    body: MenuItemUpdate,
    background_tasks: BackgroundTasks,
):
    """Partial update: fields left out keep their value."""
    item = MenuService(store).update_item(item_id, body.model_dump(exclude_unset=True))
    result = MenuItemResponse.model_validate(item)
    background_tasks.add_task(publish, "menu", "updated", result)
    return result


@router.delete("/{item_id}")
@limiter.limit(WRITE_LIMIT)
def delete_menu_item(request: Request, store: StoreDep, item_id: int, background_tasks: BackgroundTasks):
    MenuService(store).delete_item(item_id)
    background_tasks.add_task(publish, "menu", "deleted", {"id": item_id})
    return {"status": "deleted", "id": item_id}
