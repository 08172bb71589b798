"""/v1/bills - bill CRUD, lifecycle actions, reminders and summary"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    BillCreate,
    BillImportRequest,
    BillImportResponse,
    BillListResponse,
    BillResponse,
    BillUpdate,
    ComfortScoreSchema,
    PastDueRefreshResponse,
    RejectedRowSchema,
    RemindersResponse,
    SnoozeRequest,
    SummaryResponse,
    money,
)
from finance_tracker.api.v1.serializers import bill_response
from finance_tracker.api.dependencies import get_lifecycle_rules, get_request_id, get_today, get_user_id
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import BillRepository
from finance_tracker.domain import budget, lifecycle
from finance_tracker.domain.exceptions import ValidationError
from finance_tracker.domain.importing import parse_rows
from finance_tracker.domain.models import Bill
from finance_tracker.domain.rules import LifecycleRules
from finance_tracker.infrastructure.observability.metrics import (
    bill_snooze_counter,
    record_import,
    record_statuses,
)
from finance_tracker.infrastructure.observability.logging import log_snooze

router = APIRouter()

NULLABLE_BILL_FIELDS = ("notes", "interest")


def _load_bill(repo: BillRepository, user_id: str, bill_id: str) -> Bill:
    bill = repo.get(user_id, bill_id)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.get("/bills", response_model=BillListResponse)
def list_bills(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """List bills ordered by due date, each with its derived status"""
    bills = BillRepository(db).list_for_user(user_id)
    responses = [bill_response(b, today, rules) for b in bills]
    record_statuses(lifecycle.classify(b, today, rules).state for b in bills)
    return BillListResponse(bills=responses)


@router.post("/bills", response_model=BillResponse, status_code=201)
def create_bill(
    body: BillCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    bill = Bill(id="", **body.model_dump())
    bill = lifecycle.refresh_past_due_days(bill, today)
    created = BillRepository(db).create(user_id, bill)
    db.commit()
    return bill_response(created, today, rules)


@router.get("/bills/reminders", response_model=RemindersResponse)
def get_reminders(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """
    Bills needing attention, grouped for reminder banners.

    - due_today: unpaid, due today
    - upcoming: unpaid, due within the reminder window (after today)
    - urgent / past_due: per the lifecycle rules
    - reminders: everything unpaid due on or before the window end
    """
    bills = BillRepository(db).list_for_user(user_id)

    def render(items):
        return [bill_response(b, today, rules) for b in items]

    return RemindersResponse(
        due_today=render(lifecycle.due_today(bills, today)),
        upcoming=render(lifecycle.due_within_days(bills, today, rules.reminder_window_days)),
        urgent=render(lifecycle.urgent(bills, today, rules)),
        past_due=render(lifecycle.past_due(bills, today)),
        reminders=render(lifecycle.reminders(bills, today, rules)),
    )


@router.get("/bills/summary", response_model=SummaryResponse)
def get_summary(
    income_adjustment: Decimal = Query(Decimal("0"), description="Simulated monthly income change"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """Summary strip totals plus the budget comfort score"""
    bills = BillRepository(db).list_for_user(user_id)
    summary = lifecycle.summarize(bills, today, rules)

    expenses = budget.monthly_recurring_expenses(bills)
    income = budget.estimated_monthly_income(expenses, income_adjustment)
    score = budget.comfort_score(income, expenses)

    return SummaryResponse(
        month_to_date_paid=money(summary.month_to_date_paid),
        next_7_days_due=money(summary.next_7_days_due),
        overdue_count=summary.overdue_count,
        critical_count=summary.critical_count,
        unpaid_total=money(summary.unpaid_total),
        comfort=ComfortScoreSchema(
            monthly_expenses=money(expenses),
            estimated_monthly_income=money(income),
            score=score,
            label=budget.comfort_label(score),
        ),
    )


@router.post("/bills/past-due/refresh", response_model=PastDueRefreshResponse)
def refresh_past_due(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Recompute cached past-due day counts for every bill"""
    repo = BillRepository(db)
    updated = 0
    for bill in repo.list_for_user(user_id):
        refreshed = lifecycle.refresh_past_due_days(bill, today)
        if refreshed.past_due_days != bill.past_due_days:
            repo.update(user_id, bill.id, {"past_due_days": refreshed.past_due_days})
            updated += 1
    db.commit()
    return PastDueRefreshResponse(updated=updated)


@router.post("/bills/import", response_model=BillImportResponse)
def import_bills(
    body: BillImportRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """Insert valid spreadsheet rows; invalid rows are reported, not fatal"""
    request_id = get_request_id(request)
    result = parse_rows(body.rows)
    bills = [lifecycle.refresh_past_due_days(b, today) for b in result.bills]

    try:
        created = BillRepository(db).create_many(user_id, bills)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Bill import failed: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_import(len(created), len(result.rejected))
    logging.info(
        "Bills imported",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "bill_import",
            "imported": len(created),
            "rejected": len(result.rejected),
        },
    )
    return BillImportResponse(
        imported=[bill_response(b, today, rules) for b in created],
        rejected=[RejectedRowSchema(index=r.index, reason=r.reason) for r in result.rejected],
    )


@router.get("/bills/{bill_id}", response_model=BillResponse)
def get_bill(
    bill_id: str,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    bill = _load_bill(BillRepository(db), user_id, bill_id)
    return bill_response(bill, today, rules)


@router.patch("/bills/{bill_id}", response_model=BillResponse)
def update_bill(
    bill_id: str,
    body: BillUpdate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    repo = BillRepository(db)
    bill = _load_bill(repo, user_id, bill_id)

    # Explicit nulls only clear the optional columns
    fields = {
        k: v for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_BILL_FIELDS
    }
    if "due_date" in fields and fields["due_date"] != bill.due_date and bill.snoozed_until is not None:
        # A manual reschedule ends the snooze
        fields["snoozed_until"] = None

    # Keep the cached past-due count in step with the new due date / paid flag
    fields["past_due_days"] = lifecycle.compute_past_due_days(replace(bill, **fields), today)

    updated = repo.update(user_id, bill_id, fields)
    db.commit()
    return bill_response(updated, today, rules)


@router.delete("/bills/{bill_id}", status_code=204)
def delete_bill(
    bill_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    if not BillRepository(db).delete(user_id, bill_id):
        raise HTTPException(status_code=404, detail="Bill not found")
    db.commit()
    return Response(status_code=204)


@router.post("/bills/{bill_id}/snooze", response_model=BillResponse)
def snooze_bill(
    bill_id: str,
    body: SnoozeRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    """Shift a bill's due date forward, remembering the original date"""
    request_id = get_request_id(request)
    repo = BillRepository(db)
    bill = _load_bill(repo, user_id, bill_id)

    try:
        snoozed = lifecycle.refresh_past_due_days(lifecycle.snooze(bill, body.days, today, rules), today)
    except ValidationError as e:
        logging.warning(f"Snooze rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    saved = repo.save(user_id, snoozed)
    db.commit()

    bill_snooze_counter.inc()
    log_snooze(request_id, user_id, bill_id, body.days, saved.due_date.isoformat())
    return bill_response(saved, today, rules)


@router.post("/bills/{bill_id}/paid", response_model=BillResponse)
def mark_bill_paid(
    bill_id: str,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    repo = BillRepository(db)
    bill = _load_bill(repo, user_id, bill_id)
    saved = repo.save(user_id, lifecycle.refresh_past_due_days(lifecycle.mark_paid(bill), today))
    db.commit()
    return bill_response(saved, today, rules)


@router.post("/bills/{bill_id}/unpaid", response_model=BillResponse)
def mark_bill_unpaid(
    bill_id: str,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
    db: Session = Depends(get_db),
):
    repo = BillRepository(db)
    bill = _load_bill(repo, user_id, bill_id)
    saved = repo.save(user_id, lifecycle.refresh_past_due_days(lifecycle.mark_unpaid(bill), today))
    db.commit()
    return bill_response(saved, today, rules)
