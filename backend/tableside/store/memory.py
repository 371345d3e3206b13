"""Process-local store used when no database is configured."""

import itertools
import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.orm import RelationshipDirection

from tableside.core.clock import utcnow
from tableside.core.exceptions import ConflictError
from tableside.db.base import Base, VersionMixin
from tableside.store.base import M, Store

logger = logging.getLogger(__name__)


def _apply_column_defaults(obj: Base) -> None:
    """Fill unset attributes from the column defaults a database insert would apply."""
    for column in obj.__table__.columns:
        if column.primary_key or column.default is None:
            continue
        if getattr(obj, column.key, None) is not None:
            continue
        default = column.default
        if default.is_callable:
            setattr(obj, column.key, default.arg(None))
        elif default.is_scalar:
            setattr(obj, column.key, default.arg)


def _unique_columns(model: Type[Base]) -> List[str]:
    return [c.key for c in model.__table__.columns if c.unique and not c.primary_key]


class MemoryStore(Store):
    """Dict-per-model store with integer ids.

    Rows are kept as detached ORM instances, so services see the same objects
    they would get from a session. A re-entrant lock serialises writes coming
    from the request threadpool.
    """

    def __init__(self):
        self._rows: Dict[type, Dict[int, Base]] = defaultdict(dict)
        self._ids: Dict[type, itertools.count] = defaultdict(lambda: itertools.count(1))
        self._lock = threading.RLock()

    def get(self, model: Type[M], obj_id: int) -> Optional[M]:
        with self._lock:
            return self._rows[model].get(obj_id)

    def list(self, model: Type[M], **filters) -> List[M]:
        with self._lock:
            rows = [
                row for row in self._rows[model].values()
                if all(getattr(row, key) == value for key, value in filters.items())
            ]
        return sorted(rows, key=lambda row: row.id)

    def add(self, obj: M) -> M:
        with self._lock:
            _apply_column_defaults(obj)
            self._check_unique(obj)
            obj.id = next(self._ids[type(obj)])
            self._rows[type(obj)][obj.id] = obj
            self._add_children(obj)
        logger.debug(f"MemoryStore: added {type(obj).__name__} {obj.id}")
        return obj

    def save(self, obj: M) -> M:
        with self._lock:
            if obj.id is None or obj.id not in self._rows[type(obj)]:
                raise ValueError(f"{type(obj).__name__} must be added before it is saved")
            self._check_unique(obj)
            if hasattr(obj, "updated_at"):
                obj.updated_at = utcnow()
            if hasattr(obj, "last_updated"):
                obj.last_updated = utcnow()
            if isinstance(obj, VersionMixin):
                obj.increment_version()
            self._add_children(obj)
        return obj

    def delete(self, obj: M) -> None:
        with self._lock:
            self._rows[type(obj)].pop(obj.id, None)

    def _check_unique(self, obj: Base) -> None:
        for key in _unique_columns(type(obj)):
            value = getattr(obj, key)
            for other in self._rows[type(obj)].values():
                if other is not obj and getattr(other, key) == value:
                    raise ConflictError(f"{type(obj).__name__}.{key} '{value}' already exists")

    def _add_children(self, obj: Base) -> None:
        """Give ids to new rows reachable through one-to-many relationships."""
        for rel in inspect(type(obj)).relationships:
            if rel.direction is not RelationshipDirection.ONETOMANY:
                continue
            for child in getattr(obj, rel.key):
                if child.id is None:
                    _apply_column_defaults(child)
                    for local, remote in rel.local_remote_pairs:
                        setattr(child, remote.key, getattr(obj, local.key))
                    child.id = next(self._ids[type(child)])
                    self._rows[type(child)][child.id] = child
