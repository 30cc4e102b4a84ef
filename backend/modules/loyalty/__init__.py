# backend/modules/loyalty/__init__.py

"""
Loyalty token ledger: balances, transaction history and tiers.
"""

from .routes.ledger_routes import router as loyalty_router
from .models.ledger_models import (
    LoyaltyAccount,
    LedgerTransaction,
    LoyaltyTier,
    TransactionType,
)
from .services.ledger_service import LedgerService

__all__ = [
    "loyalty_router",
    "LoyaltyAccount",
    "LedgerTransaction",
    "LoyaltyTier",
    "TransactionType",
    "LedgerService",
]
