"""Feedback and loyalty schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, Field

from tableside.schemas.base import CamelModel


class FeedbackCreate(CamelModel):
    table_number: int = Field(
        alias="table", validation_alias=AliasChoices("table", "tableNumber", "table_number")
    )
    rating: int
    comment: Optional[str] = None
    order_id: Optional[int] = None


class FeedbackResponse(CamelModel):
    id: int
    table_number: int = Field(alias="table")
    order_id: Optional[int] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class FeedbackStats(CamelModel):
    average_rating: float
    total_reviews: int
    distribution: Dict[str, int]


class LoyaltyTierInfo(CamelModel):
    name: str
    min_points: int
    benefits: List[str]


class Reward(CamelModel):
    id: str
    name: str
    cost: int
    description: str


class LoyaltyAccountResponse(CamelModel):
    customer_id: str
    points: int
    tier: str
    next_tier: Optional[str] = None
    points_to_next_tier: Optional[int] = None
    last_updated: Optional[datetime] = None


class RedeemRequest(CamelModel):
    reward_id: str


class RedeemResponse(CamelModel):
    reward: Reward
    account: LoyaltyAccountResponse
