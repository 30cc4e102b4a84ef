# backend/modules/loyalty/repositories/account_repository.py

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.ledger_models import (
    LoyaltyAccount,
    LedgerTransaction,
    LoyaltyTier,
    TransactionType,
)


class AccountRepository:
    """Persistence for loyalty accounts and their transaction log."""

    def __init__(self, db: Session):
        self.db = db

    # --- Accounts ---

    def get(self, customer_id: str, for_update: bool = False) -> Optional[LoyaltyAccount]:
        query = self.db.query(LoyaltyAccount).filter(
            LoyaltyAccount.customer_id == customer_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def add(self, account: LoyaltyAccount) -> LoyaltyAccount:
        self.db.add(account)
        return account

    def top_by_earned(self, limit: int) -> List[LoyaltyAccount]:
        return (
            self.db.query(LoyaltyAccount)
            .order_by(LoyaltyAccount.total_earned.desc(), LoyaltyAccount.customer_id)
            .limit(limit)
            .all()
        )

    def top_by_spent(self, limit: int) -> List[LoyaltyAccount]:
        return (
            self.db.query(LoyaltyAccount)
            .order_by(LoyaltyAccount.total_spent.desc(), LoyaltyAccount.customer_id)
            .limit(limit)
            .all()
        )

    def totals(self) -> Dict[str, int]:
        count, earned, redeemed, balance = self.db.query(
            func.count(LoyaltyAccount.customer_id),
            func.coalesce(func.sum(LoyaltyAccount.total_earned), 0),
            func.coalesce(func.sum(LoyaltyAccount.total_redeemed), 0),
            func.coalesce(func.sum(LoyaltyAccount.balance), 0),
        ).one()
        return {
            "customers": int(count),
            "earned": int(earned),
            "redeemed": int(redeemed),
            "balance": int(balance),
        }

    def tier_distribution(self) -> Dict[str, int]:
        rows = (
            self.db.query(LoyaltyAccount.tier, func.count(LoyaltyAccount.customer_id))
            .group_by(LoyaltyAccount.tier)
            .all()
        )
        distribution = {tier.value: 0 for tier in LoyaltyTier}
        for tier, count in rows:
            distribution[LoyaltyTier(tier).value] = int(count)
        return distribution

    def count_active_since(self, since: datetime) -> int:
        return (
            self.db.query(func.count(LoyaltyAccount.customer_id))
            .filter(LoyaltyAccount.last_order_at > since)
            .scalar()
        ) or 0

    # --- Transactions ---

    def append_transaction(self, transaction: LedgerTransaction) -> LedgerTransaction:
        self.db.add(transaction)
        return transaction

    def list_transactions(self, customer_id: str, limit: int) -> List[LedgerTransaction]:
        """Most recent first, by insertion sequence"""
        return (
            self.db.query(LedgerTransaction)
            .filter(LedgerTransaction.customer_id == customer_id)
            .order_by(LedgerTransaction.id.desc())
            .limit(limit)
            .all()
        )

    def activity_since(self, since: datetime) -> Tuple[int, int]:
        """Tokens (earned, redeemed) recorded after ``since``"""
        rows = (
            self.db.query(LedgerTransaction.type, func.sum(LedgerTransaction.amount))
            .filter(LedgerTransaction.created_at > since)
            .group_by(LedgerTransaction.type)
            .all()
        )
        totals = {TransactionType(t): int(amount or 0) for t, amount in rows}
        return (
            totals.get(TransactionType.EARNED, 0),
            totals.get(TransactionType.REDEEMED, 0),
        )
