"""Store selection.

The backend is chosen once at startup from settings: a process-wide
``MemoryStore`` when no database is configured, otherwise a ``SqlStore`` per
request wrapping its own session.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends

from tableside.core.config import settings
from tableside.db.session import SessionLocal
from tableside.store.base import Store
from tableside.store.memory import MemoryStore
from tableside.store.sql import SqlStore

memory_store = MemoryStore()


@contextmanager
def store_scope() -> Iterator[Store]:
    """Open the configured store for one unit of work."""
    if not settings.use_database:
        yield memory_store
        return
    db = SessionLocal()
    try:
        yield SqlStore(db)
    finally:
        db.close()


def get_store() -> Generator[Store, None, None]:
    """Store dependency for route handlers."""
    with store_scope() as store:
        yield store


# Type alias for dependency injection
StoreDep = Annotated[Store, Depends(get_store)]

__all__ = ["Store", "MemoryStore", "SqlStore", "get_store", "store_scope", "StoreDep", "memory_store"]
