# backend/modules/loyalty/models/ledger_models.py

"""
Token ledger models: customer accounts and their append-only transaction log.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Enum,
    Numeric,
    Text,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, utc_now
import enum


class LoyaltyTier(str, enum.Enum):
    """Customer tier, derived from lifetime tokens earned"""

    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class TransactionType(str, enum.Enum):
    EARNED = "earned"
    REDEEMED = "redeemed"


# Largest single order accepted by the ledger, in dollars
MAX_ORDER_AMOUNT = 1_000_000

# Minimum lifetime tokens for each tier, highest first
TIER_THRESHOLDS = (
    (LoyaltyTier.PLATINUM, 5000),
    (LoyaltyTier.GOLD, 1500),
    (LoyaltyTier.SILVER, 500),
    (LoyaltyTier.BRONZE, 0),
)


def tier_for(total_earned: int) -> LoyaltyTier:
    """Highest tier whose threshold does not exceed ``total_earned``."""
    for tier, minimum in TIER_THRESHOLDS:
        if total_earned >= minimum:
            return tier
    return LoyaltyTier.BRONZE


class LoyaltyAccount(Base, TimestampMixin):
    """Per-customer token balance"""

    __tablename__ = "loyalty_accounts"

    customer_id = Column(String(100), primary_key=True)
    customer_name = Column(String(200))
    customer_email = Column(String(255))

    # Token counters; balance == total_earned - total_redeemed
    balance = Column(Integer, nullable=False, default=0)
    total_earned = Column(Integer, nullable=False, default=0)
    total_redeemed = Column(Integer, nullable=False, default=0)
    tier = Column(
        Enum(LoyaltyTier, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=LoyaltyTier.BRONZE,
        index=True,
    )

    # Spending stats
    total_orders = Column(Integer, nullable=False, default=0)
    total_spent = Column(Numeric(12, 2), nullable=False, default=0)
    last_order_at = Column(DateTime)

    transactions = relationship(
        "LedgerTransaction",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LedgerTransaction.id",
    )

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_loyalty_balance_non_negative"),
        CheckConstraint(
            "balance = total_earned - total_redeemed",
            name="ck_loyalty_balance_consistent",
        ),
        Index("idx_loyalty_total_earned", "total_earned"),
    )

    def __repr__(self):
        return (
            f"<LoyaltyAccount(customer_id='{self.customer_id}', "
            f"balance={self.balance}, tier={self.tier})>"
        )


class LedgerTransaction(Base):
    """Immutable earn/redeem record"""

    __tablename__ = "loyalty_transactions"

    # Surrogate key doubles as insertion sequence
    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(40), nullable=False, unique=True, index=True)
    customer_id = Column(
        String(100),
        ForeignKey("loyalty_accounts.customer_id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(
        Enum(TransactionType, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    order_id = Column(String(100))
    reward_id = Column(String(100))
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)

    account = relationship("LoyaltyAccount", back_populates="transactions")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_loyalty_txn_amount_positive"),
        Index("idx_loyalty_txn_customer", "customer_id", "id"),
    )
