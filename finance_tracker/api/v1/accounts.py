"""/v1/accounts - account CRUD and bank linking through the aggregator proxy"""

import time
import logging
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    ExchangeRequest,
    LinkTokenResponse,
    SyncItemSchema,
    SyncResponse,
    money,
)
from finance_tracker.api.v1.serializers import account_response
from finance_tracker.api.dependencies import (
    get_aggregator_client,
    get_authorization,
    get_request_id,
    get_user_id,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import AccountRepository
from finance_tracker.infrastructure.clients.aggregator import AggregatorClient
from finance_tracker.domain.amortization import liquid_balance
from finance_tracker.domain.exceptions import AggregatorError
from finance_tracker.infrastructure.observability.logging import log_sync

router = APIRouter()


@router.get("/accounts", response_model=AccountListResponse)
def list_accounts(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    accounts = AccountRepository(db).list_for_user(user_id)
    return AccountListResponse(
        accounts=[account_response(a) for a in accounts],
        total_balance=money(sum((a.balance for a in accounts), Decimal("0"))),
        liquid_balance=money(liquid_balance(accounts)),
    )


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    body: AccountCreate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    account = AccountRepository(db).create(user_id, body.model_dump())
    db.commit()
    return account_response(account)


@router.post("/accounts/link-token", response_model=LinkTokenResponse)
async def create_link_token(
    request: Request,
    authorization: Optional[str] = Depends(get_authorization),
    user_id: str = Depends(get_user_id),
    aggregator: AggregatorClient = Depends(get_aggregator_client),
):
    """Start the bank-linking flow"""
    request_id = get_request_id(request)
    try:
        link_token = await aggregator.create_link_token(authorization)
    except AggregatorError as e:
        logging.error(f"Aggregator error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=503, detail="Bank linking service unavailable")
    return LinkTokenResponse(link_token=link_token)


@router.post("/accounts/exchange", response_model=AccountListResponse)
async def exchange_public_token(
    body: ExchangeRequest,
    request: Request,
    authorization: Optional[str] = Depends(get_authorization),
    user_id: str = Depends(get_user_id),
    aggregator: AggregatorClient = Depends(get_aggregator_client),
    db: Session = Depends(get_db),
):
    """
    Finish bank linking.

    The proxy stores the credentials and creates the linked accounts; the
    refreshed account list is returned.
    """
    request_id = get_request_id(request)
    try:
        success = await aggregator.exchange_public_token(body.public_token, authorization)
    except AggregatorError as e:
        logging.error(f"Aggregator error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=503, detail="Bank linking service unavailable")

    if not success:
        raise HTTPException(status_code=502, detail="Bank link could not be completed")

    return list_accounts(user_id=user_id, db=db)


@router.post("/accounts/sync", response_model=SyncResponse)
async def sync_accounts(
    request: Request,
    authorization: Optional[str] = Depends(get_authorization),
    user_id: str = Depends(get_user_id),
    aggregator: AggregatorClient = Depends(get_aggregator_client),
    db: Session = Depends(get_db),
):
    """
    Refresh linked balances and recent transactions.

    Flow:
    1. Proxy pulls balances / transactions for every linked item
    2. Proxy writes them to the store (dedup on external transaction id)
    3. Accounts are re-read and returned with per-item results
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        results = await aggregator.sync_accounts(authorization)
    except AggregatorError as e:
        logging.error(f"Aggregator error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=503, detail="Bank sync service unavailable")

    # Pick up balances written by the proxy since this session started
    db.expire_all()
    accounts = AccountRepository(db).list_for_user(user_id)

    duration_ms = (time.time() - start_time) * 1000
    log_sync(request_id, user_id, len(results), sum(r.new_transactions for r in results), duration_ms)

    return SyncResponse(
        results=[
            SyncItemSchema(
                item_id=r.item_id,
                success=r.success,
                accounts_updated=r.accounts_updated,
                transactions_updated=r.transactions_updated,
                new_transactions=r.new_transactions,
                error=r.error,
            )
            for r in results
        ],
        accounts=[account_response(a) for a in accounts],
    )


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    account = AccountRepository(db).get(user_id, account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account_response(account)


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    body: AccountUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    fields = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    account = AccountRepository(db).update(user_id, account_id, fields)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    db.commit()
    return account_response(account)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    if not AccountRepository(db).delete(user_id, account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    db.commit()
    return Response(status_code=204)
