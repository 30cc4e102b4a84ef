# backend/modules/loyalty/routes/ledger_routes.py

"""
API routes for the loyalty token ledger.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from core.database import get_db
from ..schemas.ledger_schemas import (
    EarnRequest,
    EarnResponse,
    RedeemRequest,
    RedeemResponse,
    AccountResponse,
    TransactionListResponse,
    LeaderboardResponse,
    CustomerProfileResponse,
    CustomerListResponse,
    ProgramStatsResponse,
)
from ..services.audit_sink import AuditSink, get_audit_sink
from ..services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/rewards", tags=["Loyalty Rewards"])


def get_ledger_service(
    db: Session = Depends(get_db),
    audit_sink: AuditSink = Depends(get_audit_sink),
) -> LedgerService:
    return LedgerService(db, audit_sink=audit_sink)


# ========== Ledger Mutations ==========

@router.post("/earn", response_model=EarnResponse)
def earn_tokens(
    request: EarnRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Credit tokens for a completed order"""
    return service.earn(
        customer_id=request.customer_id,
        order_amount=request.order_amount,
        payment_method=request.payment_method,
        order_id=request.order_id,
        customer_name=request.customer_name,
        customer_email=request.customer_email,
    )


@router.post("/redeem", response_model=RedeemResponse)
def redeem_tokens(
    request: RedeemRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Spend tokens on a reward"""
    return service.redeem(request.customer_id, request.reward_id, request.cost)


# ========== Queries ==========

@router.get("/balance/{customer_id}", response_model=AccountResponse)
def get_balance(
    customer_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    return service.get_balance(customer_id)


@router.get("/transactions/{customer_id}", response_model=TransactionListResponse)
def get_transactions(
    customer_id: str,
    limit: int = Query(50, ge=1, le=50),
    service: LedgerService = Depends(get_ledger_service),
):
    """Transaction history, most recent first"""
    return {"transactions": service.get_transactions(customer_id, limit)}


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    top_n: int = Query(10, ge=1, le=100),
    service: LedgerService = Depends(get_ledger_service),
):
    return {"leaderboard": service.get_leaderboard(top_n)}


# ========== Admin Dashboard ==========

@router.get("/customers/{customer_id}", response_model=CustomerProfileResponse)
def get_customer_profile(
    customer_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    """Customer account with recent transactions and tier benefits"""
    profile = service.get_customer_profile(customer_id)
    account = AccountResponse.model_validate(profile["account"]).model_dump()
    return {
        **account,
        "recent_transactions": profile["recent_transactions"],
        "tier_benefits": profile["tier_benefits"],
    }


@router.get("/customers", response_model=CustomerListResponse)
def list_customers(
    limit: int = Query(50, ge=1, le=50),
    service: LedgerService = Depends(get_ledger_service),
):
    return service.list_customers(limit)


@router.get("/stats", response_model=ProgramStatsResponse)
def get_program_stats(service: LedgerService = Depends(get_ledger_service)):
    return service.get_program_stats()
