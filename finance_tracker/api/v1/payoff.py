"""GET /v1/bills/{bill_id}/payoff - debt payoff projections"""

from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import BillListResponse, PayoffResponse, money
from finance_tracker.api.v1.serializers import bill_response, plan_schema
from finance_tracker.api.dependencies import (
    get_lifecycle_rules,
    get_payoff_rules,
    get_request_id,
    get_today,
    get_user_id,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import AccountRepository, BillRepository
from finance_tracker.domain import amortization
from finance_tracker.domain.rules import LifecycleRules, PayoffRules
from finance_tracker.infrastructure.observability.metrics import record_projection
from finance_tracker.infrastructure.observability.logging import log_payoff

router = APIRouter()


@router.get("/bills/{bill_id}/payoff", response_model=PayoffResponse)
def get_payoff(
    bill_id: str,
    request: Request,
    lump_sum: Decimal = Query(Decimal("0"), description="One-time payment applied up front"),
    extra_monthly: Decimal = Query(Decimal("0"), description="Added to the standard monthly payment"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: PayoffRules = Depends(get_payoff_rules),
    db: Session = Depends(get_db),
):
    """
    Project payoff for one bill under three strategies.

    Flow:
    1. Standard plan: minimum payment of 10% of principal
    2. Lump-sum plan: principal reduced up front, same payment
    3. Increased-payment plan: lump sum plus extra monthly payment
    4. Affordability warning against the liquid (checking + savings) balance

    A plan that hits the month cap comes back with converged=false and no
    payoff date.
    """
    request_id = get_request_id(request)
    bills = BillRepository(db).list_for_user(user_id)
    bill = next((b for b in bills if b.id == bill_id), None)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")

    standard = amortization.standard_plan(bill, today, rules)
    lump = amortization.lump_sum_plan(bill, lump_sum, today, rules)
    increased = amortization.increased_payment_plan(bill, lump_sum, extra_monthly, today, rules)

    liquid = amortization.liquid_balance(AccountRepository(db).list_for_user(user_id))
    warning = amortization.affordability_check(bills, bill, increased.monthly_payment, liquid)

    for plan in (standard, lump, increased):
        record_projection(plan.strategy, plan.converged)
    log_payoff(request_id, user_id, bill_id, standard.converged, standard.months, warning)

    return PayoffResponse(
        bill_id=bill.id,
        standard=plan_schema(standard),
        lump_sum=plan_schema(lump),
        increased_payment=plan_schema(increased),
        liquid_balance=money(liquid),
        affordability_warning=warning,
    )


@router.get("/payoff/candidates", response_model=BillListResponse)
def get_payoff_candidates(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """Unpaid recurring debt bills that can be selected for projections"""
    bills = BillRepository(db).list_for_user(user_id)
    return BillListResponse(
        bills=[bill_response(b, today, rules) for b in amortization.debt_candidates(bills)]
    )
