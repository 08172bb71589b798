"""/v1/goals - savings goals CRUD and contributions"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    ContributionRequest,
    GoalCreate,
    GoalListResponse,
    GoalResponse,
    GoalUpdate,
)
from finance_tracker.api.v1.serializers import goal_response
from finance_tracker.api.dependencies import get_user_id
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import AccountRepository, SavingsGoalRepository
from finance_tracker.domain.exceptions import ValidationError
from finance_tracker.domain.goals import apply_contribution, resolve_status
from finance_tracker.domain.models import SavingsGoal

router = APIRouter()

NULLABLE_GOAL_FIELDS = ("deadline", "notes", "account_id")


def _check_account(db: Session, user_id: str, account_id: Optional[str]) -> None:
    if account_id and AccountRepository(db).get(user_id, account_id) is None:
        raise HTTPException(status_code=422, detail="Linked account not found")


@router.get("/goals", response_model=GoalListResponse)
def list_goals(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    goals = SavingsGoalRepository(db).list_for_user(user_id)
    return GoalListResponse(goals=[goal_response(g) for g in goals])


@router.post("/goals", response_model=GoalResponse, status_code=201)
def create_goal(
    body: GoalCreate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    _check_account(db, user_id, body.account_id)
    goal = resolve_status(SavingsGoal(id="", **body.model_dump()))
    fields = body.model_dump()
    fields["status"] = goal.status
    created = SavingsGoalRepository(db).create(user_id, fields)
    db.commit()
    return goal_response(created)


@router.get("/goals/{goal_id}", response_model=GoalResponse)
def get_goal(
    goal_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    goal = SavingsGoalRepository(db).get(user_id, goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal_response(goal)


@router.patch("/goals/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    body: GoalUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    fields = {
        k: v for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_GOAL_FIELDS
    }
    _check_account(db, user_id, fields.get("account_id"))

    repo = SavingsGoalRepository(db)
    goal = repo.update(user_id, goal_id, fields)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")

    resolved = resolve_status(goal)
    if resolved.status != goal.status:
        goal = repo.save(user_id, resolved)
    db.commit()
    return goal_response(goal)


@router.post("/goals/{goal_id}/contribute", response_model=GoalResponse)
def contribute_to_goal(
    goal_id: str,
    body: ContributionRequest,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Add money to a goal (negative amounts withdraw); completes funded goals"""
    repo = SavingsGoalRepository(db)
    goal = repo.get(user_id, goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")

    try:
        updated = apply_contribution(goal, body.amount)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    saved = repo.save(user_id, updated)
    db.commit()
    return goal_response(saved)


@router.delete("/goals/{goal_id}", status_code=204)
def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    if not SavingsGoalRepository(db).delete(user_id, goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    db.commit()
    return Response(status_code=204)
