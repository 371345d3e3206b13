"""Loyalty points: earning on paid orders, tiers, and reward redemption."""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, List, Optional, Tuple

from tableside.core.config import settings
from tableside.core.exceptions import InsufficientPointsError, NotFoundError, ValidationError
from tableside.core.sanitize import normalize_customer_id
from tableside.models.customer import LoyaltyAccount
from tableside.store.base import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoyaltyTier:
    name: str
    min_points: int
    benefits: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RewardOption:
    id: str
    name: str
    cost: int
    description: str


# Ordered by threshold
LOYALTY_TIERS: Tuple[LoyaltyTier, ...] = (
    LoyaltyTier("Silver", 0, ["5% discount on orders", "Birthday special offer"]),
    LoyaltyTier("Gold", 500, ["10% discount on orders", "Free appetizer monthly", "Priority reservations"]),
    LoyaltyTier(
        "Platinum", 1500,
        ["15% discount on orders", "Free dessert weekly", "VIP table access", "Complimentary beverages"],
    ),
)

REWARDS_CATALOG: Dict[str, RewardOption] = {
    reward.id: reward
    for reward in (
        RewardOption("free-appetizer", "Free Appetizer", 100, "Choose any starter from our menu"),
        RewardOption("10-percent-off", "10% Off Next Order", 150, "Discount on your entire next order"),
        RewardOption("free-dessert", "Free Dessert", 200, "Choose any dessert from our menu"),
        RewardOption("free-beverage", "Free Beverage", 80, "Choose any non-alcoholic drink"),
        RewardOption("20-percent-off", "20% Off Next Order", 300, "Big discount on your entire next order"),
    )
}


def loyalty_points_for(total_amount: Decimal, per_unit: Optional[int] = None) -> int:
    """Points earned for a bill: one per ``per_unit`` spent, rounded down."""
    per_unit = per_unit or settings.loyalty_points_per_currency_unit
    points = (Decimal(str(total_amount)) / per_unit).to_integral_value(rounding=ROUND_FLOOR)
    return max(int(points), 0)


def tier_for(points: int) -> LoyaltyTier:
    current = LOYALTY_TIERS[0]
    for tier in LOYALTY_TIERS:
        if points >= tier.min_points:
            current = tier
    return current


def next_tier_for(points: int) -> Optional[LoyaltyTier]:
    for tier in LOYALTY_TIERS:
        if tier.min_points > points:
            return tier
    return None


def account_summary(account: LoyaltyAccount) -> dict:
    """Account fields plus the tier position shown on the customer screen."""
    upcoming = next_tier_for(account.points)
    return {
        "customer_id": account.customer_id,
        "points": account.points,
        "tier": tier_for(account.points).name,
        "next_tier": upcoming.name if upcoming else None,
        "points_to_next_tier": upcoming.min_points - account.points if upcoming else None,
        "last_updated": account.last_updated,
    }


class LoyaltyService:
    def __init__(self, store: Store):
        self.store = store

    def get_account(self, customer_id: str) -> LoyaltyAccount:
        """Look up a balance, opening an empty account on first use."""
        key = self._key(customer_id)
        account = self.store.find_one(LoyaltyAccount, customer_id=key)
        if account:
            return account
        account = LoyaltyAccount(customer_id=key, points=0)
        self.store.add(account)
        logger.info(f"Loyalty account opened for {key}")
        return account

    def award(self, customer_id: str, points: int) -> LoyaltyAccount:
        if points < 0:
            raise ValidationError("Awarded points must be non-negative")
        account = self.get_account(customer_id)
        if points == 0:
            return account
        account.points += points
        self.store.save(account)
        logger.info(f"Awarded {points} points to {account.customer_id} (balance {account.points})")
        return account

    def redeem(self, customer_id: str, reward_id: str) -> Tuple[RewardOption, LoyaltyAccount]:
        reward = REWARDS_CATALOG.get(reward_id)
        if not reward:
            raise NotFoundError("Reward", reward_id)

        account = self.get_account(customer_id)
        if account.points < reward.cost:
            logger.warning(
                f"Redeem of '{reward_id}' refused for {account.customer_id}: "
                f"{account.points} < {reward.cost}"
            )
            raise InsufficientPointsError(account.customer_id, account.points, reward.cost)

        account.points -= reward.cost
        self.store.save(account)
        logger.info(f"{account.customer_id} redeemed '{reward_id}' for {reward.cost} points (balance {account.points})")
        return reward, account

    @staticmethod
    def _key(customer_id: str) -> str:
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer id (phone or e-mail) is required")
        return normalize_customer_id(customer_id)
