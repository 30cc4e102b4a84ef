# backend/modules/loyalty/services/ledger_service.py

"""
Core service for the loyalty token ledger.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging
import math
import uuid

from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.error_handling import (
    InsufficientBalanceError,
    InvalidRequestError,
    NotFoundError,
)
from core.locks import KeyedLock
from core.mixins import utc_now
from ..models.ledger_models import (
    MAX_ORDER_AMOUNT,
    LoyaltyAccount,
    LedgerTransaction,
    LoyaltyTier,
    TransactionType,
    tier_for,
)
from ..repositories.account_repository import AccountRepository
from .audit_sink import AuditEvent, AuditSink, LoggingAuditSink

logger = logging.getLogger(__name__)

USDC_PAYMENT_METHOD = "usdc"
RECENT_TRANSACTIONS_IN_PROFILE = 10
TOP_CUSTOMERS_IN_STATS = 5

TIER_BENEFITS = {
    LoyaltyTier.BRONZE: {"special_offers": []},
    LoyaltyTier.SILVER: {"special_offers": ["5% monthly special"]},
    LoyaltyTier.GOLD: {"special_offers": ["10% birthday discount"]},
    LoyaltyTier.PLATINUM: {"special_offers": ["Free delivery", "Priority support"]},
}

# Shared by every service instance in the process
_account_locks = KeyedLock()


def calculate_tokens(
    order_amount: float, payment_method: str, tokens_per_dollar: int = 2
) -> Dict[str, Any]:
    """Split the tokens for an order into base and payment-method bonus.

    USDC payments earn the base amount again as a bonus, doubling the total.
    """
    base_tokens = math.floor(order_amount * tokens_per_dollar)
    is_usdc = payment_method.lower() == USDC_PAYMENT_METHOD
    bonus_tokens = base_tokens if is_usdc else 0

    if is_usdc:
        reason = (
            f"{base_tokens} base tokens + {bonus_tokens} USDC payment bonus "
            f"for ${order_amount:.2f} order"
        )
    else:
        reason = (
            f"Standard rate: {tokens_per_dollar} tokens per dollar "
            f"for ${order_amount:.2f} order"
        )

    return {
        "base_tokens": base_tokens,
        "bonus_tokens": bonus_tokens,
        "total_tokens": base_tokens + bonus_tokens,
        "reason": reason,
    }


def _new_transaction_id() -> str:
    return f"txn_{uuid.uuid4().hex}"


class LedgerService:
    """Earn/redeem rules and balance queries for customer token accounts.

    Every mutation runs as one database transaction under a per-customer
    lock; on any error the session is rolled back and the account is left
    as it was. Audit events go out only after a successful commit.
    """

    def __init__(
        self,
        db: Session,
        audit_sink: Optional[AuditSink] = None,
        repository: Optional[AccountRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.repository = repository or AccountRepository(db)
        self.audit_sink = audit_sink or LoggingAuditSink()
        self.settings = settings or get_settings()

    # ========== Mutations ==========

    def earn(
        self,
        customer_id: str,
        order_amount: float,
        payment_method: str = "cash",
        order_id: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Credit tokens for a completed order.

        Args:
            customer_id: Stable customer identifier; the account is created
                on first earn.
            order_amount: Order total in dollars, positive and at most
                ``MAX_ORDER_AMOUNT``.
            payment_method: ``usdc`` doubles the tokens earned.
            order_id: Order reference stored on the transaction.

        Returns:
            Dict with ``tokens_earned``, ``new_balance``, ``tier``,
            ``breakdown`` and the written ``transaction``.

        Raises:
            InvalidRequestError: Missing customer id or bad order amount.
        """
        if not customer_id or not customer_id.strip():
            raise InvalidRequestError("customer_id is required")
        if (
            order_amount is None
            or isinstance(order_amount, bool)
            or not isinstance(order_amount, (int, float, Decimal))
            or not math.isfinite(order_amount)
            or order_amount <= 0
            or order_amount > MAX_ORDER_AMOUNT
        ):
            raise InvalidRequestError(
                f"order_amount must be a positive number up to {MAX_ORDER_AMOUNT}",
                {"order_amount": order_amount},
            )

        payment_method = (payment_method or "cash").lower()
        bonus_method = payment_method if self.settings.loyalty_usdc_bonus_enabled else ""
        tokens = calculate_tokens(
            float(order_amount), bonus_method, self.settings.loyalty_tokens_per_dollar
        )

        with _account_locks.hold(customer_id):
            try:
                account = self.repository.get(customer_id, for_update=True)
                if account is None:
                    account = self.repository.add(
                        LoyaltyAccount(
                            customer_id=customer_id,
                            customer_name=customer_name,
                            customer_email=customer_email,
                            balance=0,
                            total_earned=0,
                            total_redeemed=0,
                            tier=LoyaltyTier.BRONZE,
                            total_orders=0,
                            total_spent=Decimal("0"),
                        )
                    )
                    logger.info(f"Opened loyalty account for customer {customer_id}")
                else:
                    if customer_name:
                        account.customer_name = customer_name
                    if customer_email:
                        account.customer_email = customer_email

                now = utc_now()
                earned = tokens["total_tokens"]
                account.balance += earned
                account.total_earned += earned
                account.tier = tier_for(account.total_earned)
                account.total_orders += 1
                account.total_spent = Decimal(str(account.total_spent or 0)) + Decimal(
                    str(order_amount)
                )
                account.last_order_at = now

                transaction = None
                if earned > 0:
                    transaction = self.repository.append_transaction(
                        LedgerTransaction(
                            transaction_id=_new_transaction_id(),
                            customer_id=customer_id,
                            type=TransactionType.EARNED,
                            amount=earned,
                            description=tokens["reason"],
                            order_id=order_id,
                            created_at=now,
                        )
                    )

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            self.db.refresh(account)

        logger.info(
            f"Customer {customer_id} earned {earned} tokens "
            f"(balance {account.balance}, tier {account.tier.value})"
        )

        if transaction is not None:
            self.audit_sink.try_record(
                AuditEvent(
                    event_type=TransactionType.EARNED.value,
                    customer_id=customer_id,
                    amount=earned,
                    balance_after=account.balance,
                    transaction_id=transaction.transaction_id,
                    reference_id=order_id,
                    metadata={"payment_method": payment_method},
                )
            )

        return {
            "success": True,
            "tokens_earned": earned,
            "new_balance": account.balance,
            "tier": account.tier,
            "breakdown": {
                "base_tokens": tokens["base_tokens"],
                "bonus_tokens": tokens["bonus_tokens"],
                "reason": tokens["reason"],
            },
            "transaction": transaction,
        }

    def redeem(self, customer_id: str, reward_id: str, cost: int) -> Dict[str, Any]:
        """Spend tokens on a reward.

        Tier is left alone: it tracks lifetime earning, not the balance.

        Raises:
            InvalidRequestError: Missing ids or non-positive cost.
            NotFoundError: No account for ``customer_id``.
            InsufficientBalanceError: ``cost`` exceeds the balance.
        """
        if not customer_id or not reward_id:
            raise InvalidRequestError("customer_id and reward_id are required")
        if isinstance(cost, bool) or not isinstance(cost, int) or cost <= 0:
            raise InvalidRequestError(
                "cost must be a positive integer", {"cost": cost}
            )

        with _account_locks.hold(customer_id):
            try:
                account = self.repository.get(customer_id, for_update=True)
                if account is None:
                    raise NotFoundError("Customer", customer_id)

                if account.balance < cost:
                    raise InsufficientBalanceError(customer_id, account.balance, cost)

                account.balance -= cost
                account.total_redeemed += cost

                transaction = self.repository.append_transaction(
                    LedgerTransaction(
                        transaction_id=_new_transaction_id(),
                        customer_id=customer_id,
                        type=TransactionType.REDEEMED,
                        amount=cost,
                        description=f"Redeemed {cost} tokens for reward {reward_id}",
                        reward_id=reward_id,
                        created_at=utc_now(),
                    )
                )

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            self.db.refresh(account)

        logger.info(
            f"Customer {customer_id} redeemed {cost} tokens for {reward_id} "
            f"(balance {account.balance})"
        )

        self.audit_sink.try_record(
            AuditEvent(
                event_type=TransactionType.REDEEMED.value,
                customer_id=customer_id,
                amount=cost,
                balance_after=account.balance,
                transaction_id=transaction.transaction_id,
                reference_id=reward_id,
            )
        )

        dollar_value = Decimal(cost) / Decimal(
            self.settings.loyalty_tokens_per_dollar_redeemed
        )
        return {
            "success": True,
            "tokens_redeemed": cost,
            "new_balance": account.balance,
            "reward_id": reward_id,
            "dollar_value": f"{dollar_value:.2f}",
            "transaction": transaction,
        }

    # ========== Queries ==========

    def get_balance(self, customer_id: str) -> LoyaltyAccount:
        account = self.repository.get(customer_id)
        if account is None:
            raise NotFoundError("Customer", customer_id)
        return account

    def get_transactions(
        self, customer_id: str, limit: Optional[int] = None
    ) -> List[LedgerTransaction]:
        """Transactions for a customer, most recent first"""
        self.get_balance(customer_id)
        max_limit = self.settings.loyalty_transactions_limit
        limit = max_limit if limit is None else max(1, min(limit, max_limit))
        return self.repository.list_transactions(customer_id, limit)

    def get_leaderboard(self, top_n: Optional[int] = None) -> List[LoyaltyAccount]:
        top_n = top_n or self.settings.loyalty_leaderboard_size
        return self.repository.top_by_earned(top_n)

    def get_customer_profile(self, customer_id: str) -> Dict[str, Any]:
        """Account with recent activity and the benefits of its tier"""
        account = self.get_balance(customer_id)
        recent = self.repository.list_transactions(
            customer_id, RECENT_TRANSACTIONS_IN_PROFILE
        )
        return {
            "account": account,
            "recent_transactions": recent,
            "tier_benefits": TIER_BENEFITS[account.tier],
        }

    def list_customers(self, limit: int = 50) -> Dict[str, Any]:
        """Top customers by spend plus aggregate ledger figures (admin view)"""
        customers = self.repository.top_by_spent(limit)
        totals = self.repository.totals()
        average = totals["balance"] / totals["customers"] if totals["customers"] else 0.0
        return {
            "customers": customers,
            "stats": {
                "total_customers": totals["customers"],
                "total_tokens_issued": totals["earned"],
                "total_tokens_redeemed": totals["redeemed"],
                "average_tokens_per_customer": round(average, 2),
                "tier_distribution": self.repository.tier_distribution(),
            },
        }

    def get_program_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Dashboard figures for the whole program"""
        now = now or utc_now()
        since = now - timedelta(days=self.settings.loyalty_active_window_days)

        totals = self.repository.totals()
        earned_recent, redeemed_recent = self.repository.activity_since(since)
        top = self.repository.top_by_spent(TOP_CUSTOMERS_IN_STATS)

        return {
            "total_customers": totals["customers"],
            "active_customers": self.repository.count_active_since(since),
            "total_tokens_issued": totals["earned"],
            "total_tokens_redeemed": totals["redeemed"],
            "total_tokens_outstanding": totals["balance"],
            "recent_activity": {
                "tokens_earned": earned_recent,
                "tokens_redeemed": redeemed_recent,
            },
            "tier_distribution": self.repository.tier_distribution(),
            "top_customers": [
                {
                    "customer_id": c.customer_id,
                    "name": c.customer_name,
                    "total_spent": float(c.total_spent or 0),
                    "tier": c.tier,
                    "tokens_earned": c.total_earned,
                }
                for c in top
            ],
        }
