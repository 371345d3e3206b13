"""Loyalty routes: balance lookup, tiers and rewards."""

from typing import List

from fastapi import APIRouter, Request

from tableside.core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from tableside.schemas.customer import (
    LoyaltyAccountResponse,
    LoyaltyTierInfo,
    RedeemRequest,
    RedeemResponse,
    Reward,
)
from tableside.services.loyalty_service import (
    LOYALTY_TIERS,
    REWARDS_CATALOG,
    LoyaltyService,
    account_summary,
)
from tableside.store import StoreDep

router = APIRouter(prefix="/loyalty", tags=["loyalty"])


@router.get("/rewards", response_model=List[Reward])
@limiter.limit(READ_LIMIT)
def list_rewards(request: Request):
    return list(REWARDS_CATALOG.values())


@router.get("/tiers", response_model=List[LoyaltyTierInfo])
@limiter.limit(READ_LIMIT)
def list_tiers(request: Request):
    return list(LOYALTY_TIERS)


@router.get("/{customer_id}", response_model=LoyaltyAccountResponse)
@limiter.limit(READ_LIMIT)
def get_loyalty_account(request: Request, store: StoreDep, customer_id: str):
    """Balance for a phone number or e-mail; opens an empty account on first lookup."""
    account = LoyaltyService(store).get_account(customer_id)
    return account_summary(account)


@router.post("/{customer_id}/redeem", response_model=RedeemResponse)
@limiter.limit(WRITE_LIMIT)
def redeem_reward(request: Request, store: StoreDep, customer_id: str, body: RedeemRequest):
    reward, account = LoyaltyService(store).redeem(customer_id, body.reward_id)
    return {"reward": reward, "account": account_summary(account)}
