"""Savings goal progress and status policy"""

from dataclasses import replace
from decimal import Decimal

from finance_tracker.domain.exceptions import ValidationError
from finance_tracker.domain.models import SavingsGoal


def progress_percent(goal: SavingsGoal) -> float:
    """Share of the target saved so far, capped at 100"""
    if goal.target_amount <= 0:
        return 0.0
    progress = float(goal.current_amount / goal.target_amount * 100)
    return min(progress, 100.0)


def resolve_status(goal: SavingsGoal) -> SavingsGoal:
    """Complete an in-progress goal once the target is reached.

    Paused goals keep their status even when funded.
    """
    if goal.status == "in-progress" and goal.current_amount >= goal.target_amount:
        return replace(goal, status="completed")
    return goal


def apply_contribution(goal: SavingsGoal, amount: Decimal) -> SavingsGoal:
    """Add (or withdraw, if negative) money from a goal"""
    new_amount = goal.current_amount + amount
    if new_amount < 0:
        raise ValidationError("Goal amount can't be negative")
    return resolve_status(replace(goal, current_amount=new_amount))
