"""Ratings collected at the end of a meal."""

import logging
from typing import List, Optional

from tableside.core.exceptions import NotFoundError
from tableside.core.sanitize import sanitize_text
from tableside.models.customer import Feedback
from tableside.models.restaurant import Order
from tableside.services.table_service import TableService
from tableside.store.base import Store

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, store: Store):
        self.store = store

    def create(
        self,
        table_number: int,
        rating: int,
        comment: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> Feedback:
        TableService(self.store).get_by_number(table_number)
        if order_id is not None and not self.store.get(Order, order_id):
            raise NotFoundError("Order", order_id)

        feedback = Feedback(
            table_number=table_number,
            order_id=order_id,
            rating=rating,
            comment=sanitize_text(comment),
        )
        self.store.add(feedback)
        logger.info(f"Feedback {feedback.id}: {feedback.rating}/5 from table {table_number}")
        return feedback

    def list_feedback(self, table_number: Optional[int] = None) -> List[Feedback]:
        filters = {"table_number": table_number} if table_number is not None else {}
        return list(reversed(self.store.list(Feedback, **filters)))

    def stats(self) -> dict:
        entries = self.store.list(Feedback)
        distribution = {str(star): 0 for star in range(1, 6)}
        for entry in entries:
            distribution[str(entry.rating)] += 1
        average = sum(e.rating for e in entries) / len(entries) if entries else 0.0
        return {
            "average_rating": round(average, 2),
            "total_reviews": len(entries),
            "distribution": distribution,
        }
