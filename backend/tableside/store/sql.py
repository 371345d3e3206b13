"""Relational store backed by a SQLAlchemy session."""

import logging
from typing import List, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tableside.core.exceptions import ConflictError
from tableside.db.base import VersionMixin
from tableside.store.base import M, Store

logger = logging.getLogger(__name__)


class SqlStore(Store):
    """Each write commits on its own; there are no cross-row transactions."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, model: Type[M], obj_id: int) -> Optional[M]:
        return self.db.get(model, obj_id)

    def list(self, model: Type[M], **filters) -> List[M]:
        return self.db.query(model).filter_by(**filters).order_by(model.id).all()

    def add(self, obj: M) -> M:
        self.db.add(obj)
        self._commit(obj)
        return obj

    def save(self, obj: M) -> M:
        if isinstance(obj, VersionMixin):
            obj.increment_version()
        self.db.add(obj)
        self._commit(obj)
        return obj

    def delete(self, obj: M) -> None:
        self.db.delete(obj)
        self.db.commit()

    def _commit(self, obj: M) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error writing {type(obj).__name__}: {e.orig}")
            raise ConflictError(f"{type(obj).__name__} violates a uniqueness constraint") from e
        self.db.refresh(obj)
