"""/v1/transactions - account activity listing and idempotent import"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    TransactionCreate,
    TransactionCreatedResponse,
    TransactionListResponse,
)
from finance_tracker.api.v1.serializers import transaction_response
from finance_tracker.api.dependencies import get_user_id
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import AccountRepository, TransactionRepository
from finance_tracker.domain.models import Transaction

router = APIRouter()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    account_id: Optional[str] = Query(None, description="Restrict to one account"),
    limit: Optional[int] = Query(None, gt=0, le=500),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Transactions newest first"""
    transactions = TransactionRepository(db).list_for_user(user_id, account_id=account_id, limit=limit)
    return TransactionListResponse(transactions=[transaction_response(t) for t in transactions])


@router.post("/transactions", response_model=TransactionCreatedResponse)
def create_transaction(
    body: TransactionCreate,
    response: Response,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Record a transaction.

    When external_transaction_id is set, re-posting the same id returns the
    stored record with created=false (status 200) instead of inserting a
    duplicate. New records return 201.
    """
    if AccountRepository(db).get(user_id, body.account_id) is None:
        raise HTTPException(status_code=404, detail="Account not found")

    repo = TransactionRepository(db)
    try:
        transaction, created = repo.create_if_new(user_id, Transaction(id="", **body.model_dump()))
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent import of the same external id
        db.rollback()
        transaction, created = repo.find_external(user_id, body.external_transaction_id), False
        if transaction is None:
            raise HTTPException(status_code=409, detail="Transaction conflicts with an existing record")
    response.status_code = 201 if created else 200
    return TransactionCreatedResponse(transaction=transaction_response(transaction), created=created)
