"""Menu catalogue maintained from the admin screens."""

import logging
from typing import Any, Dict, List, Optional

from tableside.core.exceptions import NotFoundError
from tableside.models.restaurant import MenuItem
from tableside.store.base import Store

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name", "description", "price", "category", "image", "is_vegetarian",
    "is_spicy", "preparation_time", "in_stock", "inventory",
)


class MenuService:
    def __init__(self, store: Store):
        self.store = store

    def list_items(self, category: Optional[str] = None, in_stock_only: bool = False) -> List[MenuItem]:
        filters = {"category": category} if category else {}
        if in_stock_only:
            filters["in_stock"] = True
        return self.store.list(MenuItem, **filters)

    def list_categories(self) -> List[str]:
        return sorted({item.category for item in self.store.list(MenuItem)})

    def get_item(self, item_id: int) -> MenuItem:
        item = self.store.get(MenuItem, item_id)
        if not item:
            raise NotFoundError("Menu item", item_id)
        return item

    def create_item(self, **fields) -> MenuItem:
        item = MenuItem(**{k: v for k, v in fields.items() if k in EDITABLE_FIELDS})
        self.store.add(item)
        logger.info(f"Menu item {item.id} '{item.name}' created at {item.price}")
        return item

    def update_item(self, item_id: int, changes: Dict[str, Any]) -> MenuItem:
        """Apply a partial update.

        The merged values are validated on a scratch instance first so a bad
        field leaves the stored item untouched.
        """
        item = self.get_item(item_id)
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
        merged = {field: getattr(item, field) for field in EDITABLE_FIELDS}
        merged.update(changes)
        MenuItem(**merged)

        for field, value in changes.items():
            setattr(item, field, value)
        self.store.save(item)
        logger.info(f"Menu item {item.id} updated: {sorted(changes)}")
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        self.store.delete(item)
        logger.info(f"Menu item {item_id} deleted")
