# backend/modules/loyalty/schemas/__init__.py

from .ledger_schemas import (
    EarnRequest,
    RedeemRequest,
    TransactionResponse,
    EarnBreakdown,
    EarnResponse,
    RedeemResponse,
    AccountResponse,
    TransactionListResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    TierBenefits,
    CustomerProfileResponse,
    CustomerListStats,
    CustomerListResponse,
    RecentActivity,
    TopCustomer,
    ProgramStatsResponse,
)

__all__ = [
    "EarnRequest",
    "RedeemRequest",
    "TransactionResponse",
    "EarnBreakdown",
    "EarnResponse",
    "RedeemResponse",
    "AccountResponse",
    "TransactionListResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "TierBenefits",
    "CustomerProfileResponse",
    "CustomerListStats",
    "CustomerListResponse",
    "RecentActivity",
    "TopCustomer",
    "ProgramStatsResponse",
]
