"""Feedback routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.realtime import publish
from tableside.schemas.customer import FeedbackCreate, FeedbackResponse, FeedbackStats
from tableside.services.feedback_service import FeedbackService
from tableside.store import StoreDep

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("", response_model=List[FeedbackResponse])
@limiter.limit(READ_LIMIT)
def list_feedback(
    request: Request,
    store: StoreDep,
    table: Optional[int] = Query(None, description="Table number"),
):
    """Newest first."""
    return FeedbackService(store).list_feedback(table_number=table)


@router.get("/stats", response_model=FeedbackStats)
@limiter.limit(READ_LIMIT)
def get_feedback_stats(request: Request, store: StoreDep):
    return FeedbackService(store).stats()


@router.post("", response_model=FeedbackResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_feedback(request: Request, store: StoreDep, body: FeedbackCreate, background_tasks: BackgroundTasks):
    feedback = FeedbackService(store).create(
        table_number=body.table_number,
        rating=body.rating,
        comment=body.comment,
        order_id=body.order_id,
    )
    result = FeedbackResponse.model_validate(feedback)
    background_tasks.add_task(publish, "feedback", "created", result)
    return result
