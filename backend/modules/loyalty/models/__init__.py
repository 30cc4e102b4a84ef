# backend/modules/loyalty/models/__init__.py

from .ledger_models import (
    LoyaltyAccount,
    LedgerTransaction,
    LoyaltyTier,
    TransactionType,
    TIER_THRESHOLDS,
    MAX_ORDER_AMOUNT,
    tier_for,
)

__all__ = [
    "LoyaltyAccount",
    "LedgerTransaction",
    "LoyaltyTier",
    "TransactionType",
    "TIER_THRESHOLDS",
    "MAX_ORDER_AMOUNT",
    "tier_for",
]
