"""Store interface shared by the in-memory and relational implementations.

Services only talk to a ``Store``. Every ``add``/``save``/``delete`` is an
independent write; two writers touching the same row resolve as
last-write-wins unless the caller checks ``version`` first.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Type, TypeVar

from tableside.db.base import Base

M = TypeVar("M", bound=Base)


class Store(ABC):
    """Persistence boundary for all restaurant entities."""

    @abstractmethod
    def get(self, model: Type[M], obj_id: int) -> Optional[M]:
        """Fetch one row by primary key, or None."""

    @abstractmethod
    def list(self, model: Type[M], **filters) -> List[M]:
        """All rows matching the equality filters, ordered by id."""

    def find_one(self, model: Type[M], **filters) -> Optional[M]:
        rows = self.list(model, **filters)
        return rows[0] if rows else None

    @abstractmethod
    def add(self, obj: M) -> M:
        """Persist a new row and return it with its id assigned."""

    @abstractmethod
    def save(self, obj: M) -> M:
        """Persist changes made to an existing row."""

    @abstractmethod
    def delete(self, obj: M) -> None:
        """Remove a row."""
