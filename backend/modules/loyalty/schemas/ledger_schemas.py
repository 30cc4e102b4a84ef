# backend/modules/loyalty/schemas/ledger_schemas.py

"""
Pydantic schemas for the token ledger API.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime

from ..models.ledger_models import MAX_ORDER_AMOUNT, LoyaltyTier, TransactionType


class EarnRequest(BaseModel):
    """Tokens earned for a completed order"""

    customer_id: str = Field(..., min_length=1, max_length=100)
    customer_name: Optional[str] = Field(None, max_length=200)
    customer_email: Optional[str] = Field(None, max_length=255)
    order_id: Optional[str] = Field(None, max_length=100)
    order_amount: float = Field(..., gt=0, le=MAX_ORDER_AMOUNT, allow_inf_nan=False)
    payment_method: str = Field("cash", min_length=1, max_length=20)

    @field_validator("customer_id")
    @classmethod
    def strip_customer_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("customer_id must not be blank")
        return v

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v: str) -> str:
        return v.strip().lower()


class RedeemRequest(BaseModel):
    customer_id: str = Field(..., min_length=1, max_length=100)
    reward_id: str = Field(..., min_length=1, max_length=100)
    cost: int = Field(..., gt=0, strict=True)


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    customer_id: str
    type: TransactionType
    amount: int
    description: str
    order_id: Optional[str] = None
    reward_id: Optional[str] = None
    created_at: datetime


class EarnBreakdown(BaseModel):
    base_tokens: int
    bonus_tokens: int
    reason: str


class EarnResponse(BaseModel):
    success: bool = True
    tokens_earned: int
    new_balance: int
    tier: LoyaltyTier
    breakdown: EarnBreakdown
    # None when the order was too small to earn a whole token
    transaction: Optional[TransactionResponse] = None


class RedeemResponse(BaseModel):
    success: bool = True
    tokens_redeemed: int
    new_balance: int
    reward_id: str
    dollar_value: str
    transaction: TransactionResponse


class AccountResponse(BaseModel):
    """Customer token account"""

    model_config = ConfigDict(from_attributes=True)

    customer_id: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    balance: int
    total_earned: int
    total_redeemed: int
    tier: LoyaltyTier
    total_orders: int
    total_spent: float
    created_at: datetime
    last_order_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    customer_id: str
    total_earned: int
    tier: LoyaltyTier


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry]


class TierBenefits(BaseModel):
    # Tiers carry perks only; every tier earns at the same token rate
    special_offers: List[str] = Field(default_factory=list)


class CustomerProfileResponse(AccountResponse):
    recent_transactions: List[TransactionResponse] = Field(default_factory=list)
    tier_benefits: TierBenefits


class CustomerListStats(BaseModel):
    total_customers: int
    total_tokens_issued: int
    total_tokens_redeemed: int
    average_tokens_per_customer: float
    tier_distribution: Dict[str, int]


class CustomerListResponse(BaseModel):
    customers: List[AccountResponse]
    stats: CustomerListStats


class RecentActivity(BaseModel):
    tokens_earned: int
    tokens_redeemed: int


class TopCustomer(BaseModel):
    customer_id: str
    name: Optional[str] = None
    total_spent: float
    tier: LoyaltyTier
    tokens_earned: int


class ProgramStatsResponse(BaseModel):
    total_customers: int
    active_customers: int
    total_tokens_issued: int
    total_tokens_redeemed: int
    total_tokens_outstanding: int
    recent_activity: RecentActivity
    tier_distribution: Dict[str, int]
    top_customers: List[TopCustomer]
